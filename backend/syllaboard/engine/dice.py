from __future__ import annotations
import random
from typing import Optional

DIE_FACES = 6


class DieRoller:
	"""Uniform die over ``[min_face, 6]``.

	``random.Random.randint`` draws through ``getrandbits`` with rejection,
	so every face in range is equally likely. Defaults to ``SystemRandom``;
	pass a seeded ``random.Random`` for reproducible rolls.
	"""

	def __init__(self, rng: Optional[random.Random] = None) -> None:
		self._rng = rng or random.SystemRandom()

	@staticmethod
	def clamp_face(min_face: int) -> int:
		return max(1, min(DIE_FACES, int(min_face)))

	def roll(self, min_face: int = 1) -> int:
		return self._rng.randint(self.clamp_face(min_face), DIE_FACES)
