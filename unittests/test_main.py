#!/usr/bin/env python3
'''
Command line unit tests
'''

import io
import logging
import os
import shutil
import sys
import tempfile
import unittest
from unittest import mock

_current_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(1, os.path.normpath(os.path.join(_current_dir, '..')))

from perfcollapse import config
from perfcollapse.__main__ import main


def data_path(name):
    return os.path.join(_current_dir, 'data', name)


class TestMain(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.out = os.path.join(self.tmp_dir, 'out.folded')

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def read_out(self):
        with open(self.out) as f:
            return f.read()

    def test_swapper(self):
        self.assertEqual(main([data_path('swapper.txt'), '-o', self.out]), 0)
        self.assertEqual(self.read_out(),
                         'swapper;start_kernel;rest_init;cpu_idle;default_idle;native_safe_halt 1\n')

    def test_several_inputs(self):
        main([data_path('swapper.txt'), data_path('swapper.txt'), '-o', self.out])
        self.assertTrue(self.read_out().endswith('native_safe_halt 2\n'))

    def test_options_file(self):
        opts_file = os.path.join(self.tmp_dir, 'opts')
        with open(opts_file, 'w') as f:
            f.write('# collapse options\n')
            f.write('tid\n')
            f.write('--event-filter cycles\n')
        main(['@' + opts_file, data_path('mixed_events.txt'), '-o', self.out])
        self.assertEqual(self.read_out(),
                         'myapp-1234/1234;__libc_start_main;main;compute 2\n'
                         'myapp-1234/1240;main;write_output;do_syscall_64 1\n')

    def test_unreadable_input(self):
        with self.assertLogs('perfcollapse', 'ERROR'):
            status = main([os.path.join(self.tmp_dir, 'missing.txt'), '-o', self.out])
        self.assertEqual(status, 1)
        self.assertEqual(self.read_out(), '')

    def write_data(self, name, data):
        path = os.path.join(self.tmp_dir, name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def test_undecodable_bytes_kept_apart(self):
        path = self.write_data('bytes.txt',
                               b'app 10 1.0: cycles:\n  1 f\xff (/bin/app)\n\n'
                               b'app 10 1.0: cycles:\n  1 f\xfe (/bin/app)\n\n'
                               b'app 10 1.0: cycles:\n  1 f\xff (/bin/app)\n\n')
        main([path, '-o', self.out])
        with open(self.out, 'rb') as f:
            self.assertEqual(f.read(), b'app;f\xfe 1\napp;f\xff 2\n')

    def test_undecodable_bytes_to_stdout(self):
        path = self.write_data('bytes.txt', b'app 10 1.0: cycles:\n  1 f\xff (/bin/app)\n\n')
        stdout = io.TextIOWrapper(io.BytesIO())
        with mock.patch('sys.stdout', stdout):
            self.assertEqual(main([path]), 0)
        self.assertEqual(stdout.buffer.getvalue(), b'app;f\xff 1\n')

    def test_stdin_read_twice(self):
        with open(data_path('swapper.txt'), 'rb') as f:
            stdin = io.TextIOWrapper(io.BytesIO(f.read()))
        with mock.patch('sys.stdin', stdin):
            self.assertEqual(main(['-', '-', '-o', self.out]), 0)
        self.assertFalse(stdin.buffer.closed)
        self.assertEqual(self.read_out(),
                         'swapper;start_kernel;rest_init;cpu_idle;default_idle;native_safe_halt 1\n')

    def test_bad_option(self):
        with self.assertRaises(SystemExit) as cm:
            main(['--bogus', data_path('swapper.txt')])
        self.assertEqual(cm.exception.code, 2)


class TestLogging(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.out = os.path.join(self.tmp_dir, 'out.folded')
        self.log = os.path.join(self.tmp_dir, 'perfcollapse.log')

    def tearDown(self):
        logger = logging.getLogger('perfcollapse')
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        shutil.rmtree(self.tmp_dir)

    def read_log(self):
        with open(self.log) as f:
            return f.read()

    def test_warning_in_log_file(self):
        path = os.path.join(self.tmp_dir, 'in.txt')
        with open(path, 'w') as f:
            f.write('app 10 1.0: cycles:\ngarbage\n  1 leaf (/bin/app)\n\n')
        main([path, '-o', self.out, '--log', self.log])
        log = self.read_log()
        self.assertIn('perfcollapse.perfscript WARNING Unrecognized line 2: garbage', log)
        self.assertNotIn('options:', log)

    def test_debug_level(self):
        main([data_path('swapper.txt'), '-o', self.out, '--log', self.log, '--log-level', 'DEBUG'])
        log = self.read_log()
        self.assertIn('DEBUG options: Options(', log)
        self.assertIn('INFO 1 distinct stacks', log)

    def test_bad_level(self):
        with self.assertRaises(SystemExit) as cm:
            main(['--log-level', 'LOUD', data_path('swapper.txt')])
        self.assertEqual(cm.exception.code, 2)


class TestOptions(unittest.TestCase):

    def options(self, *argv):
        return config.options_from_args(config.parser().parse_args(list(argv)))

    def test_defaults(self):
        self.assertEqual(self.options(), config.Options())

    def test_tid_implies_pid(self):
        opts = self.options('--tid')
        self.assertTrue(opts.include_pid)
        self.assertTrue(opts.include_tid)

    def test_all(self):
        opts = self.options('--all')
        self.assertTrue(opts.annotate_kernel)
        self.assertTrue(opts.annotate_jit)

    def test_switches(self):
        opts = self.options('--no-pname', '--no-tidy-java', '--inline', '--context',
                            '--addrs', '--event-filter', 'cycles')
        self.assertFalse(opts.include_pname)
        self.assertFalse(opts.tidy_java)
        self.assertTrue(opts.tidy_generic)
        self.assertTrue(opts.show_inline)
        self.assertTrue(opts.show_context)
        self.assertTrue(opts.include_addrs)
        self.assertEqual(opts.event_filter, 'cycles')


if __name__ == '__main__':
    unittest.main(verbosity=2)
