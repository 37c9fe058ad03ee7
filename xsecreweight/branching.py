"""Default resonance branching ratios binned in invariant mass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, NamedTuple, Tuple

from .model import PDG_ETA, PDG_GAMMA

DELTA_M_1232 = 1114
DELTA_0_1232 = 2114
DELTA_P_1232 = 2214
DELTA_PP_1232 = 2224

RESONANCE_PDG_CODES: Tuple[int, ...] = (
    1114, 2114, 2214, 2224,        # P33(1232)
    31114, 32114, 32214, 32224,    # P33(1600)
    1112, 1212, 2122, 2222,        # S31(1620)
    11114, 12114, 12214, 12224,    # D33(1700)
    1116, 1216, 2126, 2226,        # F35(1905)
    21112, 21212, 22122, 22222,    # P31(1910)
    21114, 22114, 22214, 22224,    # P33(1920)
    1118, 2118, 2218, 2228,        # F37(1950)
    12112, 12212,                  # P11(1440)
    1214, 2124,                    # D13(1520)
    22112, 22212,                  # S11(1535)
    32112, 32212,                  # S11(1650)
    2116, 2216,                    # D15(1675)
    12116, 12216,                  # F15(1680)
    21214, 22124,                  # D13(1700)
    42112, 42212,                  # P11(1710)
    31214, 32124,                  # P13(1720)
)

_RESONANCES = frozenset(RESONANCE_PDG_CODES)

N_W_BINS = 30
W_MIN = 0.9
W_MAX = 5.0


def is_baryon_resonance(pdg: int) -> bool:
    return pdg in _RESONANCES


@dataclass(frozen=True)
class DecayChannel:
    branching_ratio: float
    daughters: Tuple[int, ...]

    def count(self, pdg: int) -> int:
        return sum(1 for d in self.daughters if d == pdg)


@dataclass
class BranchingRatioHistogram:
    """Fixed-width histogram with an underflow bin (0) and an overflow bin (n+1)."""

    n_bins: int = N_W_BINS
    w_min: float = W_MIN
    w_max: float = W_MAX
    contents: List[float] = field(init=False)

    def __post_init__(self) -> None:
        if self.n_bins <= 0:
            raise ValueError("a histogram needs at least one bin")
        if self.w_max <= self.w_min:
            raise ValueError("upper edge must lie above the lower edge")
        self.contents = [0.0] * (self.n_bins + 2)

    @property
    def width(self) -> float:
        return (self.w_max - self.w_min) / self.n_bins

    def low_edge(self, index: int) -> float:
        return self.w_min + (index - 1) * self.width

    def find_bin(self, w: float) -> int:
        if w < self.w_min:
            return 0
        if w >= self.w_max:
            return self.n_bins + 1
        return 1 + int(self.n_bins * (w - self.w_min) / (self.w_max - self.w_min))

    def fill(self, w: float, value: float) -> None:
        self.contents[self.find_bin(w)] += value

    def bin_content(self, index: int) -> float:
        if not 0 <= index <= self.n_bins + 1:
            raise IndexError(f"bin {index} out of range")
        return self.contents[index]

    def value_at(self, mass: float) -> float:
        """Content of the bin holding ``mass``, clamped to the upper edge."""
        return self.bin_content(self.find_bin(min(mass, self.w_max)))


class BranchingTables(NamedTuple):
    one_gamma: Dict[int, BranchingRatioHistogram]
    one_eta: Dict[int, BranchingRatioHistogram]


def build_branching_tables(
    decay_table: Mapping[int, Iterable[DecayChannel]],
) -> BranchingTables:
    """Bin the default X+1gamma and X+1eta branching ratios of every resonance.

    Resonances missing from ``decay_table`` get empty histograms; entries
    for other particles are ignored.
    """
    tables = BranchingTables(
        {pdg: BranchingRatioHistogram() for pdg in RESONANCE_PDG_CODES},
        {pdg: BranchingRatioHistogram() for pdg in RESONANCE_PDG_CODES},
    )
    threshold = 0.0
    for pdg in RESONANCE_PDG_CODES:
        channels = decay_table.get(pdg)
        if channels is None:
            continue
        gamma_hist = tables.one_gamma[pdg]
        eta_hist = tables.one_eta[pdg]
        for channel in channels:
            is_1gamma = channel.count(PDG_GAMMA) == 1
            is_1eta = channel.count(PDG_ETA) == 1
            for index in range(1, gamma_hist.n_bins + 1):
                w = gamma_hist.low_edge(index) + gamma_hist.width
                if w <= threshold:
                    continue
                if is_1gamma:
                    gamma_hist.fill(w, channel.branching_ratio)
                if is_1eta:
                    eta_hist.fill(w, channel.branching_ratio)
    return tables