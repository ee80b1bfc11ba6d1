import copy
import logging

import pandas as pd

import ks_bisim as ks
from lts import LTS
from lts_utils import origin, uniquify_lts

logger = logging.getLogger(__name__)


# 1.Derive the bisimulation from a stable partition-------------------------------
def bisimilar(part: ks.Partition):
    '''
    Return the bisimulation as a dict uniquified state -> class label, or None
    when some block holds states of one side only (the two lts's are not
    bisimilar). Class labels number the blocks in ascending block id order.
    '''
    bisim = {}
    for label, id in enumerate(sorted(part.blocks)):
        block = part.blocks[id]
        if not block.is_mixed():
            logger.debug('block %d is not mixed: %s', id,
                         sorted(block.states))
            return None
        for state in block.states:
            bisim[state] = label
    return bisim


# 2.Whole pipeline: uniquify, refine, decide----------------------------------
def check_bisimilar(left: LTS, right: LTS, strategy='rescan'):
    '''
    Decide whether left and right are (strongly) bisimilar. The inputs are
    copied before uniquification. Returns (bisim, left_u, right_u) where bisim
    is the relation or None, and left_u/right_u are the uniquified copies the
    relation refers to.
    '''
    if strategy not in ks.STRATEGIES:
        raise ValueError(f"unknown refinement strategy: {strategy}")
    left_u = uniquify_lts(copy.deepcopy(left), False)
    right_u = uniquify_lts(copy.deepcopy(right), True)
    part = ks.STRATEGIES[strategy](left_u, right_u)
    bisim = bisimilar(part)
    if bisim is None:
        logger.info('not bisimilar (%d blocks)', len(part.blocks))
    else:
        logger.info('bisimilar: %d classes over %d states',
                    len(part.blocks), len(bisim))
    return bisim, left_u, right_u


# group the states of a bisimulation by class
def get_classes(bisim):
    classes = {}
    for state, label in bisim.items():
        classes.setdefault(label, set()).add(state)
    return list(classes.values())


# 3.Bisimulation as a table (state, side, local_state, cls)---------------------
def relation_to_frame(bisim):
    rows = []
    for state in sorted(bisim):
        side, local_state = origin(state)
        rows.append([state, side, local_state, bisim[state]])
    return pd.DataFrame(rows, columns=['state', 'side', 'local_state', 'cls'])
