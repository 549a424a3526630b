import argparse
import collections
import logging
import os

#
# options controlling how stacks are collapsed
#

Options = collections.namedtuple('Options', [
    'include_pname',    # include process names in stacks
    'include_pid',      # include process ID with process name
    'include_tid',      # include process & thread ID with process name
    'include_addrs',    # include raw address where a symbol can't be found
    'annotate_kernel',  # put an annotation on kernel functions
    'annotate_jit',     # put an annotation on jit symbols
    'tidy_java',        # condense java signatures
    'tidy_generic',     # clean up function names a little
    'show_inline',      # un-inline using addr2line
    'show_context',     # add source context to show_inline
    'event_filter',     # event type filter, defaults to first encountered event
])

Options.__new__.__defaults__ = (
    True, False, False, False, False, False, True, True, False, False, None)


def options_from_args(args):
    return Options(
        include_pname=args.pname,
        include_pid=args.pid or args.tid,
        include_tid=args.tid,
        include_addrs=args.addrs,
        annotate_kernel=args.kernel or args.all,
        annotate_jit=args.jit or args.all,
        tidy_java=args.tidy_java,
        tidy_generic=args.tidy_generic,
        show_inline=args.inline,
        show_context=args.context,
        event_filter=args.event_filter or None,
    )


#
# command line
#

usage_notes = '''
perf script must emit both PID and TIDs for --pid and --tid to work; eg:
    perf script -F comm,pid,tid,cpu,time,event,ip,sym,dso,trace
Options may also be read from a file named as @FILE, one per line.
'''

class ArgumentParser(argparse.ArgumentParser):
    """Reads @file arguments one option per line; the leading '--' may be
    left off and lines starting with '#' are ignored."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('fromfile_prefix_chars', '@')
        super(ArgumentParser, self).__init__(*args, **kwargs)

    def convert_arg_line_to_args(self, line):
        args = line.split()
        for i in range(len(args)):
            if i == 0:
                # ignore commented lines
                if args[i][0] == '#':
                    break
                if not args[i].startswith('-'):
                    # add '--' to simulate cli option
                    args[i] = "--%s" % args[i]
            yield args[i]


def parser():
    p = ArgumentParser(
        prog='perfcollapse',
        description='Collapse perf script stack samples into folded stacks.',
        epilog=usage_notes,
        formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument('infile', nargs='*',
                   help='perf script output (default stdin)')
    p.add_argument('--pid', action='store_true',
                   help='include PID with process names')
    p.add_argument('--tid', action='store_true',
                   help='include TID and PID with process names')
    p.add_argument('--inline', action='store_true',
                   help='un-inline using addr2line')
    p.add_argument('--context', action='store_true',
                   help='adds source context to --inline')
    p.add_argument('--all', action='store_true',
                   help='all annotations (--kernel --jit)')
    p.add_argument('--kernel', action='store_true',
                   help='annotate kernel functions with a _[k]')
    p.add_argument('--jit', action='store_true',
                   help='annotate jit functions with a _[j]')
    p.add_argument('--addrs', action='store_true',
                   help="include raw addresses where symbols can't be found")
    p.add_argument('--event-filter', metavar='EVENT',
                   help='event name filter (default first event seen)')
    p.add_argument('--no-pname', dest='pname', action='store_false',
                   help='leave process names out of stacks')
    p.add_argument('--no-tidy-java', dest='tidy_java', action='store_false',
                   help='keep java signatures as they are')
    p.add_argument('--no-tidy-generic', dest='tidy_generic', action='store_false',
                   help='keep function names as they are')
    p.add_argument('--addr2line', metavar='PATH', default='addr2line',
                   help='addr2line executable for --inline (default addr2line)')
    p.add_argument('-o', '--output', metavar='FILE',
                   help='write folded stacks to FILE (default stdout)')
    p.add_argument('--log', metavar='FILE',
                   help='specify a log file')
    p.add_argument('--log-level', metavar='LEVEL',
                   choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                   default='WARNING',
                   help='{DEBUG,INFO,WARNING,ERROR,CRITICAL} (default=WARNING)')
    return p


def setup_logging(args):
    logging.basicConfig(format='%(name)s: %(levelname)s: %(message)s')
    logger = logging.getLogger('perfcollapse')
    logger.setLevel(args.log_level)
    if args.log is not None:
        path = os.path.abspath(os.path.expandvars(os.path.expanduser(args.log)))
        handler = logging.FileHandler(path)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'))
        logger.addHandler(handler)
    return logger
