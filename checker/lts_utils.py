import json
import logging
import re
from pathlib import Path

import pandas as pd

from lts import LTS, Tran

logger = logging.getLogger(__name__)

LEFT = 'left'
RIGHT = 'right'


# 1.Uniquify an lts (left -> even ids, right -> odd ids)------------------------
def uniquify_lts(lts: LTS, right):
    offset = 1 if right else 0

    def uniquify(state):
        return state * 2 + offset

    lts.states = {
        uniquify(state): payload
        for state, payload in lts.states.items()
    }
    lts.bound_reached = {
        uniquify(state): flag
        for state, flag in lts.bound_reached.items()
    }
    for tran in lts.trans:
        tran.state_from = uniquify(tran.state_from)
        tran.state_to = uniquify(tran.state_to)
    return lts


def is_left(state):
    return state % 2 == 0


# uniquified state -> (side, id in its own lts)
def origin(state):
    return (LEFT if is_left(state) else RIGHT), state // 2


# 2.Load/dump an lts from a json document---------------------------------------
def load_lts(filepath):
    '''
    Load an LTS from a JSON document of the form
        {"states": {"0": payload, ...} or [0, 1, ...],
         "transitions": [{"source": 0, "label": "a", "destination": 1}, ...],
         "bound_reached": {"1": true, ...}}    (optional)
    Labels that are JSON arrays or objects are turned into tuples so they can
    be used as index keys. Duplicate transitions are dropped.
    '''
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"LTS file not found: {filepath}")
    with path.open('r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{filepath}: not a JSON document ({e})") from e
        except UnicodeDecodeError as e:
            raise ValueError(f"{filepath}: not UTF-8 encoded ({e})") from e
    if not isinstance(data, dict):
        raise ValueError(f"{filepath}: expected a JSON object at top level")
    for key in ('states', 'transitions'):
        if key not in data:
            raise ValueError(f"{filepath}: missing '{key}'")

    states = parse_states(data['states'], filepath)
    trans = parse_trans(data['transitions'], states, filepath)
    bound_reached = {}
    for state, flag in data.get('bound_reached', {}).items():
        state = to_state_id(state, filepath)
        if state not in states:
            raise ValueError(
                f"{filepath}: bound_reached refers to unknown state {state}")
        bound_reached[state] = bool(flag)

    lts = LTS(states, trans, bound_reached)
    logger.debug('loaded %s: %d states, %d transitions', filepath,
                 len(states), len(trans))
    return lts


def parse_states(raw, filepath):
    if isinstance(raw, dict):
        items = raw.items()
    elif isinstance(raw, list):
        items = ((k, None) for k in raw)
    else:
        raise ValueError(f"{filepath}: 'states' must be an object or a list")
    states = {}
    for k, payload in items:
        state = to_state_id(k, filepath)
        if state in states:
            raise ValueError(f"{filepath}: duplicated state id {k!r}")
        states[state] = payload
    return states


def parse_trans(raw, states, filepath):
    if not isinstance(raw, list):
        raise ValueError(f"{filepath}: 'transitions' must be a list")
    lst = []
    for i, item in enumerate(raw):
        try:
            source, label, destination = (item['source'], item['label'],
                                          item['destination'])
        except (TypeError, KeyError) as e:
            raise ValueError(
                f"{filepath}: transition #{i} needs source, label and "
                f"destination") from e
        source = to_state_id(source, filepath)
        destination = to_state_id(destination, filepath)
        for state in (source, destination):
            if state not in states:
                raise ValueError(
                    f"{filepath}: transition #{i} refers to unknown state "
                    f"{state}")
        lst.append([source, freeze_label(label), destination])

    # remove duplicated transitions, keeping the first occurrence
    # (object dtype: labels come back as the loaded python values)
    df = pd.DataFrame(lst,
                      columns=['source', 'label', 'destination'],
                      dtype=object)
    df = df.drop_duplicates()
    if len(df) < len(lst):
        logger.debug('%s: dropped %d duplicated transitions', filepath,
                     len(lst) - len(df))
    return [
        Tran(int(source), label, int(destination))
        for source, label, destination in df.itertuples(index=False)
    ]


# ints, whole floats and decimal integer strings (json object keys)
def to_state_id(value, filepath):
    if isinstance(value, bool):
        raise ValueError(f"{filepath}: invalid state id {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and re.fullmatch(r'-?[0-9]+', value.strip()):
        return int(value)
    raise ValueError(f"{filepath}: invalid state id {value!r}")


def freeze_label(label):
    if isinstance(label, list):
        return tuple(freeze_label(part) for part in label)
    if isinstance(label, dict):
        return tuple(
            (k, freeze_label(v)) for k, v in sorted(label.items()))
    return label


def thaw_label(label):
    if isinstance(label, tuple):
        return [thaw_label(part) for part in label]
    return label


def dump_lts(lts: LTS, filepath):
    states, trans, bound_reached = lts.get_infor()
    data = {
        'states': {str(state): payload
                   for state, payload in states.items()},
        'transitions': [{
            'source': state_from,
            'label': thaw_label(label),
            'destination': state_to
        } for state_from, label, state_to in (t.get_infor() for t in trans)],
        'bound_reached': {
            str(state): flag
            for state, flag in bound_reached.items() if flag
        },
    }
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
