import logging

logger = logging.getLogger(__name__)


# 1.LTS (pre-computed reachable state space)---------------------------------
class LTS(object):

    def __init__(self, states, trans, bound_reached=None):
        # states: id -> payload (payload is never inspected here)
        self.states = states
        self.trans = trans
        self.bound_reached = bound_reached if bound_reached is not None else {}

    def get_infor(self):
        return self.states, self.trans, self.bound_reached

    # all labels in the lts (no duplicates, first occurrence order)
    def get_labels(self):
        labels = {}
        for tran in self.trans:
            state_from, label, state_to = tran.get_infor()
            labels.setdefault(label, None)
        return list(labels)

    def is_bound_reached(self, state):
        return bool(self.bound_reached.get(state, False))

    def print_infor(self):
        logger.info('lts: %d states, %d transitions, %d labels',
                    len(self.states), len(self.trans), len(self.get_labels()))


# 2.Transition----------------------------------------------------------------
class Tran(object):

    def __init__(self, state_from, label, state_to):
        self.state_from = state_from
        self.label = label
        self.state_to = state_to

    def get_infor(self):
        return self.state_from, self.label, self.state_to

    def __eq__(self, other):
        if not isinstance(other, Tran):
            return NotImplemented
        return self.get_infor() == other.get_infor()

    def __hash__(self):
        return hash(self.get_infor())

    def __repr__(self):
        return 'Tran({!r}, {!r}, {!r})'.format(*self.get_infor())
