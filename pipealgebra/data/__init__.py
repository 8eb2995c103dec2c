from .dataset import Fold, as_frame, as_target, check_alignment
