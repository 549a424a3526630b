import collections
import re

#
# line shapes found in "perf script" output
#
# examples of header lines; the default output has the TID but not the PID:
#   java 25607 4794564.109216: cycles:
#   java 12688 [002] 6544038.708352: cpu-clock:
#   V8 WorkerThread 25607 4794564.109216: cycles:
#   java 24636/25607 [000] 4794564.109216: cycles:
#   V8 WorkerThread 24636/25607 [000] 94564.109216: cycles:
#
# examples of frame lines:
#   ffffffff8103ce3b native_safe_halt ([kernel.kallsyms])
#   7fffb84c9afc cpu_startup_entry+0x800047c022ec ([kernel.kallsyms])
#   7f722d142778 Ljava/io/PrintStream;::print (/tmp/perf-19982.map)
#

Comment = collections.namedtuple('Comment', ['text'])
CmdlineMeta = collections.namedtuple('CmdlineMeta', ['text', 'target_pname'])
Blank = collections.namedtuple('Blank', [])
Header = collections.namedtuple('Header', ['comm', 'pid', 'tid', 'event'])
FrameLine = collections.namedtuple('FrameLine', ['pc', 'rawfunc', 'module'])
Unrecognized = collections.namedtuple('Unrecognized', ['text'])

UNKNOWN_PID = '?'

header_pat = re.compile(r'^(\S.+?)\s+(\d+)/*(\d+)?\s+')
event_pat = re.compile(r'(\S+):\s*$')
frame_pat = re.compile(r'^\s*(\w+)\s*(.+) \((\S*)\)')


def target_pname(cmdline):
    """Name of the process launched by perf: step backwards over the
    args to find the first one that is not an option."""
    for arg in reversed(cmdline.split()):
        if not arg.startswith('-'):
            return arg.rsplit('/', 1)[-1]
    return None


def match_cmdline(line):
    if line.startswith('# cmdline'):
        return CmdlineMeta(line, target_pname(line))

def match_comment(line):
    if line.startswith('#'):
        return Comment(line)

def match_blank(line):
    if not line:
        return Blank()

def match_header(line):
    m = header_pat.match(line)
    if m:
        comm, pid, tid = m.groups()
        if tid is None:
            tid = pid
            pid = UNKNOWN_PID
        m = event_pat.search(line)
        event = m.group(1) if m else None
        return Header(comm, pid, tid, event)

def match_frame(line):
    m = frame_pat.match(line)
    if m:
        return FrameLine(*m.groups())


# order matters: a cmdline is also a comment, and frame lines are only
# tried once the line is known not to be a header
matchers = [
    match_cmdline,
    match_comment,
    match_blank,
    match_header,
    match_frame,
]

def classify(line):
    """Return the tagged shape of one input line (without its newline)."""
    for matcher in matchers:
        shape = matcher(line)
        if shape is not None:
            return shape
    return Unrecognized(line)
