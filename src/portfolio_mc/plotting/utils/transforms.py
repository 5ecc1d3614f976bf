from typing import Dict, List

from ...data_structures import HistogramBin, YearBand


def bands_to_series(bands: List[YearBand]) -> Dict[str, list]:
    """
    Column view of a YearBand sequence: {"year": [...], "median": [...], ...}.
    """
    series = {"year": [], "q10": [], "q25": [], "median": [], "q75": [], "q90": []}
    for band in bands:
        for key in series:
            series[key].append(getattr(band, key))
    return series


def bins_to_series(bins: List[HistogramBin]) -> Dict[str, list]:
    return {
        "label": [b.range_label for b in bins],
        "count": [b.count for b in bins],
    }
