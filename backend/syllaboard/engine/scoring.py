"""Score coercion, percentage normalisation and the die-minimum table."""
from __future__ import annotations
import math
import re
from typing import Any, List, Optional, Tuple


# (percent >= threshold, minimum face), evaluated top-down
DIE_MIN_THRESHOLDS: List[Tuple[float, int]] = [
	(100.0, 6),
	(95.0, 5),
	(85.0, 4),
	(70.0, 3),
	(50.0, 2),
]
DEFAULT_DIE_MIN = 1

_NUMBER_TOKEN = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_INTEGER_TOKEN = re.compile(r"[-+]?\d+")


def _first_number(text: str) -> Optional[float]:
	match = _NUMBER_TOKEN.search(text)
	if not match:
		return None
	try:
		return float(match.group(0))
	except ValueError:
		return None


def _as_float(raw: Any) -> Optional[float]:
	# bool is an int subclass but never a score
	if raw is None or isinstance(raw, bool):
		return None
	if isinstance(raw, (int, float)):
		try:
			value = float(raw)
		except OverflowError:
			return None
	elif isinstance(raw, str):
		value = _first_number(raw)
	else:
		return None
	if value is None or not math.isfinite(value):
		return None
	return value


def parse_optional_non_negative_number(raw: Any) -> Optional[float]:
	"""Coerce a raw field to a finite non-negative number, or ``None``.

	Numbers pass through when finite and >= 0. Strings are scanned for their
	first numeric token (``"18 pts"`` gives 18.0). Anything else, including
	negative values and bools, is treated as absent.
	"""
	value = _as_float(raw)
	if value is None or value < 0:
		return None
	return value


def parse_optional_integer(raw: Any) -> Optional[int]:
	"""Coerce a raw step count to a signed int, or ``None`` if it is not integral.

	Ints and integer tokens are kept exact; only fractional input goes through float.
	"""
	if isinstance(raw, bool):
		return None
	if isinstance(raw, int):
		return raw
	if isinstance(raw, str):
		match = _NUMBER_TOKEN.search(raw)
		if match and _INTEGER_TOKEN.fullmatch(match.group(0)):
			return int(match.group(0))
	value = _as_float(raw)
	if value is None or not value.is_integer():
		return None
	return int(value)


def clamp_percent(value: float) -> float:
	return max(0.0, min(100.0, value))


def normalize_percent(
	score_obtained: Optional[float],
	score_max: Optional[float],
	score_percent: Optional[float] = None,
) -> Optional[float]:
	"""Turn a raw score or an explicit percentage into a 0-100 percentage.

	An explicit percentage wins over a computed one. Returns ``None`` when
	neither is knowable.
	"""
	if isinstance(score_percent, (int, float)) and not isinstance(score_percent, bool) and math.isfinite(score_percent):
		return clamp_percent(float(score_percent))
	if score_obtained is None or score_max is None:
		return None
	if not math.isfinite(score_max) or score_max <= 0:
		return None
	return clamp_percent(100.0 * score_obtained / score_max)


def minimum_face(percent: Optional[float]) -> int:
	if percent is None:
		return DEFAULT_DIE_MIN
	for threshold, face in DIE_MIN_THRESHOLDS:
		if percent >= threshold:
			return face
	return DEFAULT_DIE_MIN
