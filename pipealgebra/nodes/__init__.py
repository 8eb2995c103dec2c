from .base import Node
from .composite import CompositeNode, Parallel, Sequential
