"""Gait generators for one-, two- and four-legged robots."""

from __future__ import annotations

from leggedtraj.gait_generator import Combos, GaitGenerator, GaitInfo, Gaits

# biped feet
L, R = 0, 1
# quadruped feet
LF, RF, LH, RH = 0, 1, 2, 3


def _state(n_ee, *in_contact):
    return tuple(ee in in_contact for ee in range(n_ee))


def make_gait_generator(leg_count):
    """A gait generator for a robot with ``leg_count`` legs."""
    generators = {
        1: MonopedGaitGenerator,
        2: BipedGaitGenerator,
        4: QuadrupedGaitGenerator,
    }
    try:
        return generators[leg_count]()
    except KeyError:
        raise ValueError(f"no gait generator for {leg_count} legs") from None


class _TableGaitGenerator(GaitGenerator):
    """Looks strides and combinations up in tables set by subclasses."""

    _combos: dict = {}

    def _strides(self):
        raise NotImplementedError

    def get_gait(self, gait):
        strides = self._strides()
        if gait not in strides:
            raise ValueError(f"gait {gait!r} not implemented for {type(self).__name__}")
        return strides[gait]()

    def set_combo(self, combo):
        if combo not in self._combos:
            raise ValueError(f"gait combination {combo!r} not defined")
        self.set_gaits(self._combos[combo])


class MonopedGaitGenerator(_TableGaitGenerator):
    """Hopping gaits of a single leg."""

    _combos = {
        Combos.C0: [Gaits.STAND, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1, Gaits.STAND],
        Combos.C1: [Gaits.STAND, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1, Gaits.STAND],
        Combos.C2: [Gaits.STAND, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1, Gaits.STAND],
        Combos.C3: [Gaits.STAND, Gaits.HOP2, Gaits.HOP2, Gaits.HOP2, Gaits.STAND],
        Combos.C4: [Gaits.STAND, Gaits.HOP2, Gaits.HOP2, Gaits.HOP2, Gaits.HOP2,
                    Gaits.HOP2, Gaits.STAND],
    }

    def __init__(self):
        super().__init__()
        self.o = (True,)
        self.x = (False,)
        self.set_gaits([Gaits.STAND])

    def set_combo(self, combo):
        super().set_combo(combo)

    def get_gait(self, gait):
        return super().get_gait(gait)

    def _strides(self):
        return {
            Gaits.STAND: lambda: GaitInfo((0.5,), (self.o,)),
            Gaits.FLIGHT: lambda: GaitInfo((0.5,), (self.x,)),
            Gaits.HOP1: lambda: GaitInfo((0.3, 0.3), (self.o, self.x)),
            Gaits.HOP2: lambda: GaitInfo((0.2, 0.3), (self.o, self.x)),
        }


class BipedGaitGenerator(_TableGaitGenerator):
    """Walking, running and hopping gaits of two legs."""

    _combos = {
        Combos.C0: [Gaits.STAND, Gaits.WALK1, Gaits.WALK1, Gaits.WALK1, Gaits.WALK1, Gaits.STAND],
        Combos.C1: [Gaits.STAND, Gaits.RUN1, Gaits.RUN1, Gaits.RUN1, Gaits.RUN1, Gaits.STAND],
        Combos.C2: [Gaits.STAND, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1, Gaits.STAND],
        Combos.C3: [Gaits.STAND, Gaits.HOP1, Gaits.HOP2, Gaits.HOP2, Gaits.STAND],
        Combos.C4: [Gaits.STAND, Gaits.HOP5, Gaits.HOP5, Gaits.HOP5, Gaits.STAND],
    }

    def __init__(self):
        super().__init__()
        self.I = _state(2)
        self.P = _state(2, L)
        self.b = _state(2, R)
        self.B = _state(2, L, R)
        self.set_gaits([Gaits.STAND])

    def set_combo(self, combo):
        super().set_combo(combo)

    def get_gait(self, gait):
        return super().get_gait(gait)

    def _strides(self):
        return {
            Gaits.STAND: self._stand,
            Gaits.FLIGHT: self._flight,
            Gaits.WALK1: self._walk,
            Gaits.WALK2: self._walk,
            Gaits.RUN1: self._run,
            Gaits.RUN3: self._run,
            Gaits.HOP1: self._hop,
            Gaits.HOP2: self._left_hop,
            Gaits.HOP3: self._right_hop,
            Gaits.HOP5: self._gallop_hop,
        }

    def _stand(self):
        return GaitInfo((0.2,), (self.B,))

    def _flight(self):
        return GaitInfo((0.5,), (self.I,))

    def _walk(self):
        step, stance = 0.3, 0.05
        return GaitInfo(
            (step, stance, step, stance),
            (self.b, self.B,   # swing left foot
             self.P, self.B),  # swing right foot
        )

    def _run(self):
        flight, pushoff, landing = 0.4, 0.15, 0.15
        return GaitInfo(
            (pushoff, flight, landing + pushoff, flight, landing),
            (self.b, self.I, self.P, self.I, self.b),
        )

    def _hop(self):
        push, flight, land = 0.15, 0.5, 0.15
        return GaitInfo((push, flight, land), (self.B, self.I, self.B))

    def _gallop_hop(self):
        push, flight, land = 0.2, 0.3, 0.2
        return GaitInfo((push, flight, land, land), (self.P, self.I, self.b, self.B))

    def _left_hop(self):
        push, flight, land = 0.15, 0.4, 0.15
        return GaitInfo((push, flight, land), (self.b, self.I, self.b))

    def _right_hop(self):
        push, flight, land = 0.2, 0.2, 0.2
        return GaitInfo((push, flight, land), (self.P, self.I, self.P))


class QuadrupedGaitGenerator(_TableGaitGenerator):
    """Walks, trots, paces, bounds and gallops of four legs."""

    _combos = {
        Combos.C0: [Gaits.STAND, Gaits.WALK2, Gaits.WALK2, Gaits.WALK2, Gaits.WALK2E, Gaits.STAND],
        Combos.C1: [Gaits.STAND, Gaits.RUN2, Gaits.RUN2, Gaits.RUN2, Gaits.RUN2E, Gaits.STAND],
        Combos.C2: [Gaits.STAND, Gaits.RUN3, Gaits.RUN3, Gaits.RUN3, Gaits.RUN3E, Gaits.STAND],
        Combos.C3: [Gaits.STAND, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1, Gaits.HOP1E, Gaits.STAND],
        Combos.C4: [Gaits.STAND, Gaits.HOP3, Gaits.HOP3, Gaits.HOP3, Gaits.HOP3E, Gaits.STAND],
    }

    def __init__(self):
        super().__init__()
        n = 4
        # flight phase
        self.II = _state(n)
        # one leg in contact
        self.PI = _state(n, LH)
        self.bI = _state(n, RH)
        self.IP = _state(n, LF)
        self.Ib = _state(n, RF)
        # two legs in contact
        self.Pb = _state(n, LH, RF)
        self.bP = _state(n, RH, LF)
        self.BI = _state(n, LH, RH)
        self.IB = _state(n, LF, RF)
        self.PP = _state(n, LH, LF)
        self.bb = _state(n, RH, RF)
        # three legs in contact
        self.Bb = _state(n, LH, RH, RF)
        self.BP = _state(n, LH, RH, LF)
        self.bB = _state(n, RH, LF, RF)
        self.PB = _state(n, LH, LF, RF)
        # all legs in contact
        self.BB = _state(n, LF, RF, LH, RH)
        self.set_gaits([Gaits.STAND])

    def set_combo(self, combo):
        super().set_combo(combo)

    def get_gait(self, gait):
        return super().get_gait(gait)

    def _strides(self):
        return {
            Gaits.STAND: self._stand,
            Gaits.FLIGHT: self._flight,
            Gaits.WALK1: self._walk,
            Gaits.WALK2: self._walk_overlap,
            Gaits.WALK2E: lambda: self.remove_transition(self._walk_overlap()),
            Gaits.RUN1: self._trot,
            Gaits.RUN2: self._trot_fly,
            Gaits.RUN2E: self._trot_fly_end,
            Gaits.RUN3: self._pace,
            Gaits.RUN3E: self._pace_end,
            Gaits.HOP1: self._bound,
            Gaits.HOP1E: self._bound_end,
            Gaits.HOP2: self._pronk,
            Gaits.HOP3: self._gallop,
            Gaits.HOP3E: lambda: self.remove_transition(self._gallop()),
            Gaits.HOP5: self._limp,
        }

    def _stand(self):
        return GaitInfo((0.3,), (self.BB,))

    def _flight(self):
        return GaitInfo((0.3,), (self.Bb,))

    def _pronk(self):
        push, flight, land = 0.3, 0.4, 0.3
        return GaitInfo((push, flight, land), (self.BB, self.II, self.BB))

    def _walk(self):
        step, stand = 0.3, 0.2
        return GaitInfo(
            (step, stand, step, stand, step, stand, step, stand),
            (self.bB, self.BB, self.Bb, self.BB,
             self.PB, self.BB, self.BP, self.BB),
        )

    def _walk_overlap(self):
        three, lateral, diagonal = 0.25, 0.13, 0.13
        return GaitInfo(
            (three, lateral, three, diagonal, three, lateral, three, diagonal),
            (self.bB, self.bb, self.Bb,
             self.Pb,  # start lifting RH
             self.PB, self.PP, self.BP,
             self.bP),  # start lifting LH
        )

    def _trot(self):
        step, stand = 0.3, 0.2
        return GaitInfo((step, stand, step, stand), (self.bP, self.BB, self.Pb, self.BB))

    def _trot_fly(self):
        stand, flight = 0.4, 0.1
        return GaitInfo((stand, flight, stand, flight), (self.bP, self.II, self.Pb, self.II))

    def _trot_fly_end(self):
        return GaitInfo((0.4,), (self.bP,))

    def _pace(self):
        stand, flight = 0.3, 0.1
        return GaitInfo((stand, flight, stand, flight), (self.PP, self.II, self.bb, self.II))

    def _pace_end(self):
        return GaitInfo((0.3,), (self.PP,))

    def _bound(self):
        stand, flight = 0.3, 0.1
        return GaitInfo((stand, flight, stand, flight), (self.BI, self.II, self.IB, self.II))

    def _bound_end(self):
        return GaitInfo((0.3,), (self.BI,))

    def _gallop(self):
        a = 0.3  # both feet in air
        b = 0.2  # overlap
        c = 0.2  # transition front->hind
        return GaitInfo(
            (b, a, b, c, b, a, b, c),
            (self.Bb, self.BI, self.BP,  # front legs swing forward
             self.bP,                    # transition phase
             self.bB, self.IB, self.PB,  # hind legs swing forward
             self.Pb),
        )

    def _limp(self):
        a = 0.1  # three in contact
        b = 0.2  # all in contact
        c = 0.1  # one in contact
        return GaitInfo(
            (a, b, c, a, b, c),
            (self.Bb, self.BB, self.IP, self.Bb, self.BB, self.IP),
        )