import io
import json
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout

import pandas as pd

import tool
from arguments import BisimArguments


def lts_doc(n, trans):
    return {
        'states': list(range(n)),
        'transitions': [{
            'source': s,
            'label': a,
            'destination': d
        } for s, a, d in trans],
    }


class TestTool(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.prefix = os.path.join(self.tmp.name, 'out', 'run')

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        self.tmp.cleanup()

    def write(self, name, data):
        path = os.path.join(self.tmp.name, name)
        with open(path, 'w') as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        return path

    def run_tool(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = tool.main(list(argv))
        return code, out.getvalue()

    def test_parse_args(self):
        args = tool.parse_args(['l.json', 'r.json', 'x', '--strategy',
                                'worklist', '--csv'])
        self.assertEqual(
            args,
            BisimArguments('l.json', 'r.json', 'x', strategy='worklist',
                           csv=True))
        self.assertEqual(args.left_dot, 'x-left.dot')
        self.assertEqual(args.right_dot, 'x-right.dot')
        self.assertEqual(args.relation_csv, 'x-relation.csv')

    def test_bisimilar_writes_files(self):
        left = self.write('l.json', lts_doc(2, [(0, 'a', 1)]))
        right = self.write('r.json', lts_doc(3, [(0, 'a', 1), (0, 'a', 2)]))
        log_file = os.path.join(self.tmp.name, 'logs', 'pisim.log')
        code, out = self.run_tool(left, right, self.prefix, '--csv',
                                  '--log-file', log_file)
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), 'Bisimilar (2 classes)')
        for suffix in ('-left.dot', '-right.dot'):
            with open(self.prefix + suffix) as f:
                self.assertTrue(f.read().startswith('digraph'))
        df = pd.read_csv(self.prefix + '-relation.csv')
        self.assertEqual(df['state'].tolist(), [0, 1, 2, 3, 5])
        classes = df.groupby('cls')['state'].apply(frozenset)
        self.assertEqual(set(classes),
                         {frozenset({0, 1}), frozenset({2, 3, 5})})
        with open(log_file) as f:
            self.assertIn('bisimilar', f.read())

    def test_not_bisimilar(self):
        left = self.write('l.json', lts_doc(2, [(0, 'a', 1)]))
        right = self.write('r.json',
                           lts_doc(2, [(0, 'a', 1), (0, 'b', 1)]))
        code, out = self.run_tool(left, right, self.prefix, '--strategy',
                                  'worklist')
        self.assertEqual(code, 1)
        self.assertEqual(out.strip(), 'Not bisimilar')
        self.assertFalse(os.path.exists(self.prefix + '-left.dot'))

    def test_load_errors_are_fatal(self):
        left = self.write('l.json', lts_doc(2, [(0, 'a', 1)]))
        bad = self.write('bad.json', '{"states": [0]')
        missing = os.path.join(self.tmp.name, 'missing.json')
        for right in (bad, missing):
            code, out = self.run_tool(left, right, self.prefix)
            self.assertEqual(code, 2)
            self.assertEqual(out, '')


if __name__ == "__main__":
    unittest.main()
