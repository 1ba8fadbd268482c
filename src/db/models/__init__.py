# SQLAlchemy models
from .base import Base
from .learning_style import LearningStyleProfileRow

__all__ = [
    "Base",
    "LearningStyleProfileRow",
]
