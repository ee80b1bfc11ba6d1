import logging
from collections import deque

from lts import LTS
from lts_utils import is_left

logger = logging.getLogger(__name__)


# 1.Block: a candidate equivalence class---------------------------------------
class Block(object):

    def __init__(self, id, states=None):
        self.id = id
        self.states = states if states is not None else set()

    # a block is mixed if it holds states from both the left and right lts
    def is_mixed(self):
        left = right = False
        for state in self.states:
            if is_left(state):
                left = True
            else:
                right = True
            if left and right:
                return True
        return False

    def __repr__(self):
        return 'Block({}, {})'.format(self.id, sorted(self.states))


# 2.Partition: blocks plus state->block and label->transitions indices---------
class Partition(object):

    def __init__(self):
        self.blocks = {}  # block id -> Block
        self.states = {}  # state -> containing Block
        self.actions = {}  # label -> [Tran]
        self.next_id = 0

    def new_block(self, states=None):
        block = Block(self.next_id, states)
        self.next_id += 1
        return block

    def add(self, block):
        self.blocks[block.id] = block

    def remove(self, block):
        del self.blocks[block.id]

    def collect_states(self, block, lts: LTS):
        for state in lts.states:
            block.states.add(state)
            self.states[state] = block

    def collect_actions(self, lts: LTS):
        for tran in lts.trans:
            self.actions.setdefault(tran.label, []).append(tran)


def new_partition(left: LTS, right: LTS):
    '''
    Build the coarsest partition of the merged (already uniquified) state
    spaces: a single block holding every state. An empty merged state set
    gives a partition without blocks.
    '''
    part = Partition()
    block = part.new_block()
    part.collect_states(block, left)
    part.collect_states(block, right)
    if block.states:
        part.add(block)
    part.collect_actions(left)
    part.collect_actions(right)
    return part


# 3.Signature: sorted ids of the blocks reachable from source under action------
def destinations(source, action, part: Partition):
    dests = set()
    for tran in part.actions.get(action, []):
        if tran.state_from == source:
            dests.add(part.states[tran.state_to].id)
    return sorted(dests)


# 4.Split a block on an action------------------------------------------------
def split_ks(block: Block, action, part: Partition):
    '''
    Split block by comparing each member's signature under action with the one
    of an arbitrary representative. Returns (block, empty block) when the
    block is stable for action; otherwise two fresh blocks (b1, b2), b1 holding
    the states that agree with the representative. The fresh blocks are not
    installed in the partition, see refine().
    '''
    s = next(iter(block.states))
    sdests = destinations(s, action, part)
    states1 = set()
    states2 = set()
    for t in block.states:
        if destinations(t, action, part) == sdests:
            states1.add(t)
        else:
            states2.add(t)
    if not states2:
        return block, Block(None)
    return part.new_block(states1), part.new_block(states2)


# replace b by b1 and b2 in part
def refine(part: Partition, b, b1, b2):
    part.remove(b)
    part.add(b1)
    part.add(b2)
    for state in b.states:
        if state in b1.states:
            part.states[state] = b1
        else:
            part.states[state] = b2


# 5.Refine to a fixpoint, rescanning everything after each split---------------
def part_ks(left: LTS, right: LTS, on_split=None):
    '''
    Kanellakis-Smolka partition refinement over the union of left and right.
    Every (block, action) pair is scanned; the first effective split is
    installed and the scan restarts, since signatures computed so far may
    refer to the replaced block. Stops after a pass without splits.
    on_split, if given, is called with the partition after each split.
    '''
    part = new_partition(left, right)
    passes = 0
    changed = True
    while changed:
        changed = False
        passes += 1
        for id in sorted(part.blocks):
            block = part.blocks[id]
            for action in part.actions:
                b1, b2 = split_ks(block, action, part)
                if not b2.states:
                    continue
                logger.debug('split block %d on %r into %d (%d) and %d (%d)',
                             id, action, b1.id, len(b1.states), b2.id,
                             len(b2.states))
                refine(part, block, b1, b2)
                if on_split is not None:
                    on_split(part)
                changed = True
                break
            if changed:
                break
    logger.info('partition stable after %d passes: %d blocks', passes,
                len(part.blocks))
    return part


# 6.Refine to a fixpoint with a worklist of possibly splittable blocks----------
def predecessors(part: Partition):
    preds = {}
    for trans in part.actions.values():
        for tran in trans:
            preds.setdefault(tran.state_to, set()).add(tran.state_from)
    return preds


def part_ks_worklist(left: LTS, right: LTS, on_split=None):
    '''
    Same result as part_ks, but only re-examines blocks that may have become
    splittable: the two halves of a split block and the blocks holding
    predecessors of its states.
    '''
    part = new_partition(left, right)
    preds = predecessors(part)
    queue = deque(sorted(part.blocks))
    queued = set(queue)

    def push(id):
        if id not in queued:
            queued.add(id)
            queue.append(id)

    examined = 0
    while queue:
        id = queue.popleft()
        queued.discard(id)
        block = part.blocks.get(id)
        # replaced by a split since it was queued
        if block is None:
            continue
        examined += 1
        for action in part.actions:
            b1, b2 = split_ks(block, action, part)
            if not b2.states:
                continue
            logger.debug('split block %d on %r into %d (%d) and %d (%d)',
                         id, action, b1.id, len(b1.states), b2.id,
                         len(b2.states))
            refine(part, block, b1, b2)
            if on_split is not None:
                on_split(part)
            push(b1.id)
            push(b2.id)
            for state in block.states:
                for pred in preds.get(state, ()):
                    push(part.states[pred].id)
            break
    logger.info('partition stable after %d block examinations: %d blocks',
                examined, len(part.blocks))
    return part


STRATEGIES = {
    'rescan': part_ks,
    'worklist': part_ks_worklist,
}
