# leggedtraj

Building blocks for setting up trajectory optimization problems for legged
robots: piecewise cubic splines driven by node variables, contact schedules,
terrain models, single-rigid-body dynamics, and a few costs and constraints
that report their values, bounds and dense Jacobians as numpy arrays.

## Modules

- `leggedtraj.state`: `Dx` (`POS`, `VEL`, `ACC`), `State` and `Node`
  (a `State` with position and velocity only).
- `leggedtraj.polynomial`: `Polynomial` and `CubicHermitePolynomial`, with
  analytic derivatives with respect to the start and end node
  (`derivative_wrt_start_node`, `derivative_wrt_end_node`) and the duration
  (`derivative_of_pos_wrt_duration`).
- `leggedtraj.spline`: `Spline` and `get_segment_id`. At a junction between
  two segments, time belongs to the earlier segment.
- `leggedtraj.problem`: `Bounds`, `Component`, `VariableSet`,
  `ConstraintSet`, `CostTerm` and `Composite`, plus
  `LinearEqualityConstraint` (M x + v = 0) and `SoftConstraint`, which turns
  a constraint into the cost 0.5 (g - b)^T W (g - b) around the centre of its
  bounds.
- `leggedtraj.nodes_variables`: `NodesVariables`, `NodesVariablesAll`,
  `NodeValueInfo`, `Side`, `NodesObserver`, and the variable names
  `ee_motion_nodes_id`, `ee_force_nodes_id` and `ee_schedule_id`.
- `leggedtraj.phase_nodes`: nodes parameterised by alternating contact
  phases, `NodesVariablesEEMotion` (the foot stays put in contact) and
  `NodesVariablesEEForce` (the force is zero in the air).
- `leggedtraj.node_spline`: `NodeSpline`, which follows its node variables
  and gives Jacobians with respect to them.
- `leggedtraj.phase_durations`: `PhaseDurations`, optimisable phase
  durations whose last phase fills up the total time, and
  `PhaseDurationsObserver`.
- `leggedtraj.phase_spline`: `PhaseSpline`, a node spline timed by a
  `PhaseDurations` set, with Jacobians with respect to the durations.
- `leggedtraj.spline_holder`: `SplineHolder`, the base and endeffector
  splines built from all variable sets.
- `leggedtraj.euler_converter`: Euler ZYX angles to rotation matrices,
  quaternions (w, x, y, z), angular velocity and acceleration, and
  `EulerConverter` with their Jacobians with respect to the spline nodes.
- `leggedtraj.height_map`: `HeightMap` and the terrains `FlatGround`,
  `Block`, `Stairs`, `Gap`, `Slope`, `Chimney`, `ChimneyLR` and
  `CSVHeightMap`, with surface normal and tangents (`Direction`) and their
  derivatives.
- `leggedtraj.gait_generator` and `leggedtraj.gaits`: contact schedules
  (`Gaits`, `Combos`, `GaitGenerator`) for one, two and four legs, through
  `make_gait_generator`.
- `leggedtraj.dynamics`: `DynamicModel` and `SingleRigidBodyDynamics`, the
  Newton-Euler residual and its Jacobians.
- `leggedtraj.costs`: `NodeCost`, a weighted sum of squares of one node
  value over all nodes.
- `leggedtraj.constraints`: `ForceConstraint` (unilateral force inside a
  linearised friction pyramid) and `SplineAccConstraint` (continuous
  acceleration across spline junctions).

## Installation

```
pip install leggedtraj
```

## Examples

A contact schedule for a flying trot:

```python
from leggedtraj.gaits import make_gait_generator
from leggedtraj.gait_generator import Combos

gen = make_gait_generator(4)
gen.set_combo(Combos.C1)
durations = gen.phase_durations(2.0, 0)  # phases of leg 0, scaled to 2 s
print(durations, gen.is_in_contact_at_start(0))
```

A spline over node variables, and a constraint evaluated on it:

```python
from leggedtraj.constraints import SplineAccConstraint
from leggedtraj.node_spline import NodeSpline
from leggedtraj.nodes_variables import NodesVariablesAll
from leggedtraj.problem import Composite

nodes = NodesVariablesAll(3, 3, "base-lin")
nodes.set_by_linear_interpolation([0.0, 0.0, 0.5], [1.0, 0.0, 0.5], 1.0)
spline = NodeSpline(nodes, [0.5, 0.5])
print(spline.get_point(0.25).p())

variables = Composite("variables")
variables.add_component(nodes)
acc = SplineAccConstraint(spline, "base-lin")
acc.link_with_variables(variables)
print(acc.get_values(), acc.get_jacobian().shape)
```

Changing the variables with `nodes.set_variables(...)` updates every spline
that follows them.

## What the package does not do

- It ships no solver. Values, bounds and Jacobians are there to be handed to
  one; nothing here runs an optimisation.
- It does not assemble a complete problem for you: there is no ready-made
  formulation that creates all variables, constraints and costs for a robot,
  and no robot kinematic models or preset robot descriptions.
- Of the constraints, only `LinearEqualityConstraint`, `ForceConstraint` and
  `SplineAccConstraint` are included; there are no constraints for dynamics
  over time, range of motion, terrain contact, swing motion or total
  duration.
- There is no command-line program and no visualisation.

## Running the tests

```
pip install "leggedtraj[test]"
pytest
```