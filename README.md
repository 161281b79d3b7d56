# regretkit

A small toolkit for solving extensive-form games with Monte Carlo
counterfactual regret minimization (MCCFR). It uses only the standard library.

The solver is generic. You describe a game through a few protocols. The
library then samples game trees, groups their non-leaf nodes into information
sets, computes regret and policy update vectors, and folds them into
discounted accumulators.

## Modules

- `regretkit.protocols` defines the structural interfaces a game provides:
  `Turn` (with a `chance()` class method), `Edge`, `Game` (`root`, `turn`,
  `apply`, `payoff`), `Info` (`choices`) and `Encoder` (`seed`, `info`, and a
  default `branches` that asks the node).
- `regretkit.tree` holds sampled game trees.
  - `Tree` offers `seed`, `grow`, `at`, `all` and `partition`. `partition` groups the non-leaf nodes by their info.
  - `Node` offers `parent`, `incoming`, `up`, `children`, `outgoing`, `follow`, `descendants`, `branches` and `ancestry`. `ancestry` walks towards the root and is also what iterating a node does.
  - `InfoSet` offers `push`, `span`, `head` and `info`.
  - There are also the `Branch` and `Counterfactual` named tuples.
- `regretkit.profile` provides `Profile`, an abstract base class.
  - Subclasses supply `increment`, `walker`, `epochs`, `sum_policy` and `sum_regret`.
  - From these it derives regret matching (`policy`, `policy_vector`), the average strategy (`advice`), the sampling distribution (`sample`), reach probabilities, counterfactual and expected values, regret gains and external sampling (`explore`).
  - Sampling uses a `random.Random` seeded from the epoch and the info.
  - The module also has a `normalise` helper for weight lists.
- `regretkit.blueprint` provides `Blueprint`, the training loop.
  - The loop covers `solve`, `batch`, `tree`, `counterfactual`, `update_regret` and `update_weight`.
  - Discounting is done by `discount`, with `alpha`, `omega`, `gamma` and `period`.
  - Accumulated regrets are floored at `REGRET_MIN`.
  - `request_interrupt()` and `clear_interrupt()` give cooperative interruption.
- `regretkit.transport` defines the abstract `Support`, `Density`, `Measure`
  and `Coupling` types for optimal transport. Its `density()` and `support()`
  helpers accept a `Density`, a mapping, or an iterable of
  `(point, probability)` pairs.
- `regretkit.rps` is rock-paper-scissors, a complete reference game. It has
  `Edge`, `Turn` and `Game`, and a single `RPS` object that is trainer, profile
  and encoder at once.

## Installation

```
pip install regretkit
```

## Solving rock-paper-scissors

```python
from regretkit.rps import RPS, Turn, Edge

solver = RPS().solve()
for edge in Edge:
    print(edge, solver.advice(Turn.P1, edge))
print(solver)
```

`solve()` runs `RPS.iterations()` rounds, and `RPS.iterations()` equals
`tree_count() // batch_size()`. Each round samples `batch_size()` trees and
applies the counterfactual updates for the current walker's information sets.
It then advances the epoch. Walkers alternate between `Turn.P1` and `Turn.P2`.

- `advice(info, edge)` gives the long-run average strategy.
- `policy(info, edge)` gives the current regret-matched strategy.
- `str(solver)` tabulates regret, weight, policy and advice for every turn and throw.

Wins in which scissors takes part pay double. These are rock beating scissors
and scissors beating paper. As a result the equilibrium is not uniform.

`RPS.train()` runs a full session and logs the result through `logging`.

To stop a long training run from another thread, call
`regretkit.blueprint.request_interrupt()`. The loop finishes its current batch,
logs a warning and returns. Call `clear_interrupt()` before training again.

## Bringing your own game

1. Implement a `Game` with `root`, `turn`, `apply` and `payoff`.
2. Implement a hashable `Info` with `choices()`.
3. Implement a `Turn` with a `chance()` class method. `Profile.explore` samples chance turns uniformly.
4. Subclass `Blueprint` and `Profile`, and provide:
   - `game_class`, the game type whose `root()` starts every tree
   - `train`, `batch_size` and `tree_count` class methods
   - `encoder()`, returning an object with `seed(game)` and `info(tree, leaf)`
   - `profile()` and `advance()`
   - the accumulators, through `sum_regret`, `sum_policy`, `set_regret` and `set_policy`
   - `increment`, `walker` and `epochs`

`RPS` in `regretkit.rps` is a short, complete example to follow.

## What it does not do

- There is no command-line program. Everything is used from Python.
- Trained profiles are not saved or loaded. Accumulated values live in memory only.
- Rock-paper-scissors is the only game included. There is no poker game, card handling or hand abstraction.
- `regretkit.transport` only defines interfaces. It has no concrete coupling or transport solver.
- Trees in a batch are sampled one after another, not in parallel.