# xsecreweight

Weight calculators for neutrino interaction systematics. Each calculator
takes an event and returns a weight. The weight shows how the event's
probability changes when one or more model parameters move away from their
defaults. Parameters are moved by "tweak dials", given in units of their
one-sigma fractional uncertainty.

## Calculators

| Module | Class | What it reweights |
| --- | --- | --- |
| `xsecreweight.nc` | `NCReweight` | overall neutral-current scale (QE by default; RES and DIS on request) |
| `xsecreweight.ccqe_axial` | `CCQEAxialReweight` | CCQE axial form factor shape, from dipole (dial 0) to z-expansion (dial 1) |
| `xsecreweight.ccqe_vec` | `CCQEVecReweight` | CCQE vector form factor shape, from BBA (dial 0) to dipole (dial 1) |
| `xsecreweight.resonant` | `CCRESReweight`, `ResonantReweight` | resonance normalisation, M_A and M_V |
| `xsecreweight.ncres` | `NCRESReweight` | NC resonance normalisation, M_A and M_V |
| `xsecreweight.coh` | `COHReweight` | coherent pion M_A, R_0 and CC/NC normalisations |
| `xsecreweight.dis` | `DISReweight` | Bodek-Yang higher-twist and valence corrections, above W and Q2 cuts |
| `xsecreweight.resonance_decay` | `ResonanceDecayReweight` | resonance branching ratios to X + 1 photon and X + 1 eta, and the pion angle in Delta(1232) to N pi |

The resonance calculators take a `ResonantMode`. Under `MA_MV`, the mass
dials change both shape and rate. Under `NORM_AND_MA_MV_SHAPE` (the default),
the mass dials keep the integrated cross section fixed, and a separate
normalisation dial scales the rate.

`DISReweight` takes a `DISMode` in the same way: `ABC_V12U` (the default) or
`ABC_V12U_SHAPE`.

Every calculator derives from `xsecreweight.model.ReweightModel` and offers
the same interface:

- `applies_to(event)`
- `is_handled(syst)`
- `set_systematic(syst, value)`
- `reset()`
- `reconfigure()`
- `calc_weight(event)`
- `calc_chisq()`, which is 0 except for `CCQEAxialReweight`, where it is the
  dial squared.

Systematics are members of the `Syst` enum.

## Building blocks (`xsecreweight.model`)

- `Event` holds an `Interaction` summary, a list of `Particle`s, the
  generation weight and the stored differential and integrated cross
  sections. Each `Particle` carries a `FourVector`.
- `CrossSectionModel` wraps your own functions. You give it a differential
  function `(interaction, phase_space, config)`, an optional integrated
  function `(interaction, config)`, and a config dict. It offers
  `xsec(interaction, phase_space)`, `integral(interaction)` and
  `configure(config)`.
- `Uncertainty` maps each `Syst` to a fractional error. The error is either
  one symmetric value or a `(minus, plus)` pair.
- `FlavourSelection` switches reweighting of each neutrino flavour on or off.

## Usage

```python
from xsecreweight.model import Syst
from xsecreweight.nc import NCReweight

calc = NCReweight()
calc.set_systematic(Syst.XSEC_NC, 1.2)
calc.reconfigure()

for event in events:
    if calc.applies_to(event):
        weight = calc.calc_weight(event)
```

Setting a dial takes three steps:

1. Call `set_systematic` to set the dial.
2. Call `reconfigure()` to pass the new value on to the tweaked model.
3. Call `calc_weight` for each event.

`reset()` sets every dial back to zero. A calculator whose dials are all zero
gives a weight of exactly 1.

By default, the cross section stored in the event serves as the reference.
For the first 20 events, the calculators also recompute it with the default
model and log a warning on a mismatch. Two keyword options control this:
`use_old_weight_from_file` and `n_weight_checks_to_do`.

## Helpers

- `xsecreweight.branching`: `build_branching_tables` turns a decay table
  (resonance PDG code to `DecayChannel`s) into `BranchingRatioHistogram`s of
  default branching ratio against W.
- `xsecreweight.delta_decay`: `find_delta_pion`, `pion_cos_theta` and
  `angular_weight` find the Delta(1232) to N pi pion, compute its
  rest-frame angle, and compute the angular weight.

## What the package does not do

- It reads no event files.
- It ships no physics cross-section models. Every `CrossSectionModel`, decay
  table and uncertainty table must be supplied by the caller.
- It has no command-line program.

## Tests

```
pip install -e .[test]
pytest
```