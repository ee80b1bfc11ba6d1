#!/usr/bin/env python
import argparse
import logging
import sys
from pathlib import Path

import bisim_utils as bu
import dot_utils as du
import ks_bisim as ks
import lts_utils as lu
from arguments import BisimArguments

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='pisim',
        description='Check two labelled transition systems for strong '
        'bisimilarity and draw them coloured by equivalence class')
    parser.add_argument('left', help='left lts (json)')
    parser.add_argument('right', help='right lts (json)')
    parser.add_argument('out_prefix',
                        help='prefix of the written .dot (and .csv) files')
    parser.add_argument('--strategy',
                        choices=sorted(ks.STRATEGIES),
                        default='rescan',
                        help='partition refinement strategy (default: rescan)')
    parser.add_argument('--csv',
                        action='store_true',
                        help='also write the relation as <prefix>-relation.csv')
    parser.add_argument('--verbose', '-v', action='store_true')
    parser.add_argument('--log-file', dest='log_file', default=None)
    return BisimArguments(**vars(parser.parse_args(argv)))


def setup_logging(args: BisimArguments):
    level = logging.DEBUG if args.verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]
    if args.log_file:
        log_path = Path(args.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_path), mode='w'))
    logging.basicConfig(level=level,
                        format='[%(levelname)s] %(message)s',
                        handlers=handlers,
                        force=True)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args)

    # 1)load both lts's (malformed input is fatal)
    try:
        left = lu.load_lts(args.left)
        right = lu.load_lts(args.right)
    except (OSError, ValueError) as e:
        logger.error('%s', e)
        return 2
    left.print_infor()
    right.print_infor()

    # 2)partition refinement
    bisim, left_u, right_u = bu.check_bisimilar(left, right, args.strategy)
    if bisim is None:
        print('Not bisimilar')
        return 1

    # 3)draw both sides with their states named by class
    du.write_dot(du.bisim_to_dot(bisim, left_u, 'left'), args.left_dot)
    du.write_dot(du.bisim_to_dot(bisim, right_u, 'right'), args.right_dot)
    if args.csv:
        Path(args.relation_csv).parent.mkdir(parents=True, exist_ok=True)
        bu.relation_to_frame(bisim).to_csv(args.relation_csv, index=False)
        logger.info('wrote %s', args.relation_csv)

    print('Bisimilar ({} classes)'.format(len(set(bisim.values()))))
    return 0


if __name__ == '__main__':
    sys.exit(main())
