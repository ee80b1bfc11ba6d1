import logging
from pathlib import Path

from graphviz import Digraph

from lts import LTS

logger = logging.getLogger(__name__)


# pretty print a label for a graph edge (tuples are joined)
def label_to_str(label):
    if isinstance(label, tuple):
        return ' '.join(label_to_str(part) for part in label)
    return str(label)


# 1.Draw a uniquified lts with its states replaced by their bisimulation class-----
def bisim_to_dot(bisim, lts: LTS, name='bisim'):
    dot = Digraph(name)
    states, trans, bound_reached = lts.get_infor()
    for state in sorted(states):
        label = str(bisim[state])
        # initial states are 0 (left) and 1 (right) after uniquification
        if lts.is_bound_reached(state):
            dot.node(name=label, label=label, peripheries='3')
        elif state == 0 or state == 1:
            dot.node(name=label, label=label, peripheries='2')
        else:
            dot.node(name=label, label=label)
    for tran in trans:
        state_from, label, state_to = tran.get_infor()
        dot.edge(str(bisim[state_from]), str(bisim[state_to]),
                 label=label_to_str(label))
    return dot


def write_dot(dot: Digraph, filepath):
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dot.source, encoding='utf-8')
    logger.info('wrote %s', path)
    return path
