from typing import Dict, Iterable, List, Optional

import numpy as np

STRONG_YEAR_RETURN = 15
WEAK_YEAR_RETURN = -10


def select_simulation_years(valid_years: List[int], count: int,
                            must_include: Iterable[int] = (),
                            market_returns: Optional[Dict[int, float]] = None,
                            rng: Optional[np.random.Generator] = None) -> List[int]:
    """
    Pick a representative sample of start years.

    Must-include years come first. With ``market_returns`` one year followed by
    a strong market and one followed by a weak market are drawn from ``rng``.
    Remaining slots are filled by striding across the unused years. The result
    is sorted and never longer than ``count``.
    """
    if not valid_years or count <= 0:
        return []

    valid = set(valid_years)
    selected = []

    def add(year):
        if year not in selected and len(selected) < count:
            selected.append(year)

    for year in must_include:
        if year in valid:
            add(year)

    if market_returns and len(selected) < count:
        rng = rng if rng is not None else np.random.default_rng()
        strong = [y for y in valid_years if market_returns.get(y + 1, 0) > STRONG_YEAR_RETURN]
        weak = [y for y in valid_years if market_returns.get(y + 1, 0) < WEAK_YEAR_RETURN]
        if strong:
            add(strong[int(rng.integers(len(strong)))])
        if weak:
            add(weak[int(rng.integers(len(weak)))])

    remaining = [y for y in valid_years if y not in selected]
    open_slots = count - len(selected)
    if open_slots > 0 and remaining:
        step = max(1, len(remaining) // open_slots)
        for year in remaining[::step]:
            add(year)
        # striding can underfill; top up in order
        for year in remaining:
            add(year)

    return sorted(selected)
