from __future__ import annotations

from typing import Optional


FULL_STRIP_MAX = 7


def page_numbers(current: int, total: int) -> list[Optional[int]]:
	"""
	Page buttons for the pager strip.

	Up to FULL_STRIP_MAX pages every page is listed. Beyond that the strip
	shows the first three pages, the current page and the last two; each
	gap is marked with None (rendered as an ellipsis).
	"""
	total = max(1, int(total))
	current = min(max(1, int(current)), total)
	if total <= FULL_STRIP_MAX:
		return list(range(1, total + 1))

	wanted = sorted({1, 2, 3, current, total - 1, total})
	strip: list[Optional[int]] = []
	previous = 0
	for page in wanted:
		if page - previous > 1:
			strip.append(None)
		strip.append(page)
		previous = page
	return strip
