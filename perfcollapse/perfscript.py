import logging
import re

from perfcollapse import lines, symbols
from perfcollapse.config import Options
from perfcollapse.events import EventFilter
from perfcollapse.folded import FoldedStacks
from perfcollapse.header import TraceHeader
from perfcollapse.inline import Addr2lineResolver

logger = logging.getLogger(__name__)

# modules addr2line can't do anything with
no_inline_pat = re.compile(r'(perf-\d+.map|kernel\.|\[[^\]]+\])')


def process_label(comm, pid, tid, opts):
    if opts.include_tid:
        label = '%s-%s/%s' % (comm, pid, tid)
    elif opts.include_pid:
        label = '%s-%s' % (comm, pid)
    else:
        label = comm
    # downstream tools split on whitespace too
    return label.replace(' ', '_')


class CollapseState:
    """Everything one run accumulates: the record being read, the
    event filter and the folded stacks collected so far."""

    def __init__(self, opts=None, resolver=None):
        self.opts = opts or Options()
        if resolver is None and self.opts.show_inline:
            resolver = Addr2lineResolver(self.opts.show_context)
        self.resolver = resolver
        self.events = EventFilter(self.opts.event_filter)
        self.folded = FoldedStacks()
        self.header = TraceHeader()
        self.target_pname = None
        self.lineno = 0
        self.reset()

    def reset(self):
        self.stack = []
        self.pname = None
        self.pid = None
        self.tid = None

    #
    # one handler per line shape
    #

    def on_cmdline(self, shape):
        self.header.add(shape.text)
        if shape.target_pname:
            self.target_pname = shape.target_pname
            logger.debug('perf target process: %s', self.target_pname)

    def on_comment(self, shape):
        self.header.add(shape.text)

    def on_blank(self, shape):
        # end of stack; samples whose header was filtered have no name
        if self.pname is None:
            self.reset()
            return
        if self.opts.include_pname:
            self.stack.insert(0, self.pname)
        if self.stack:
            self.folded.record(self.stack, 1)
        self.reset()

    def on_header(self, shape):
        if shape.event is not None and not self.events.accept(shape.event):
            return
        self.pid, self.tid = shape.pid, shape.tid
        self.pname = process_label(shape.comm, shape.pid, shape.tid, self.opts)

    def on_frame(self, shape):
        if self.pname is None:
            return
        pc, module = shape.pc, shape.module
        rawfunc = symbols.strip_offset(shape.rawfunc)

        if self.opts.show_inline and not no_inline_pat.search(module):
            self.stack[0:0] = self.resolver(pc, module)
            return

        # skip process names
        if rawfunc.startswith('('):
            return

        self.stack[0:0] = symbols.frames(rawfunc, pc, module, self.pname, self.opts)

    def on_unrecognized(self, shape):
        logger.warning('Unrecognized line %d: %s', self.lineno, shape.text)

    handlers = {
        lines.CmdlineMeta: on_cmdline,
        lines.Comment: on_comment,
        lines.Blank: on_blank,
        lines.Header: on_header,
        lines.FrameLine: on_frame,
        lines.Unrecognized: on_unrecognized,
    }

    def feed(self, line):
        self.lineno += 1
        if line.endswith('\n'):
            line = line[:-1]
        shape = lines.classify(line)
        self.handlers[type(shape)](self, shape)


def collapse(f, opts=None, resolver=None, state=None):
    """Collapse the perf script lines read from f. Returns the state,
    whose folded attribute holds the counts."""
    if state is None:
        state = CollapseState(opts, resolver)
    for line in f:
        state.feed(line)
    return state
