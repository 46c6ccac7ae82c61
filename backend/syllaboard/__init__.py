"""Course-progress board: complete syllabus tasks, roll the die, move around the board."""

__version__ = "0.1.0"
