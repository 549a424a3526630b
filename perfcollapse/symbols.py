import re

#
# clean up a single function name found on a frame line
#

UNKNOWN = '[unknown]'

INLINED = '_[i]'
KERNEL = '_[k]'
JITTED = '_[j]'

offset_pat = re.compile(r'\+0x[\da-f]+$')
go_method_pat = re.compile(r'\.\(.*\)\.')
args_pat = re.compile(r'\((?!anonymous namespace\)).*')
quotes_pat = re.compile('["\']')
java_label_pat = re.compile(r'java(-.+)?')
kernel_module_pat = re.compile(r'(^\[|vmlinux$)')
jit_module_pat = re.compile(r'/tmp/perf-\d+\.map')


def basename(path):
    return path.rsplit('/', 1)[-1]

def strip_offset(rawfunc):
    # Linux 4.8 added symbol offsets to perf script output by default, eg:
    #   7fffb84c9afc cpu_startup_entry+0x800047c022ec ([kernel.kallsyms])
    return offset_pat.sub('', rawfunc)

def is_java_label(label):
    """True if the process label looks like a java process, in which case
    function names are java signatures worth condensing."""
    return bool(label) and java_label_pat.search(label) is not None

def is_kernel_module(module):
    return kernel_module_pat.search(module) is not None and 'unknown' not in module

def is_jit_module(module):
    return jit_module_pat.search(module) is not None


def unknown_symbol(module, pc, include_addrs=False):
    # use the module name instead, if known
    if module != UNKNOWN:
        func = basename(module)
    else:
        func = 'unknown'
    if include_addrs:
        return '[%s <%s>]' % (func, pc)
    return '[%s]' % func

def tidy_generic(func):
    # ';' separates frames in the output
    func = func.replace(';', ':')
    if not go_method_pat.search(func):
        # not a Go method name like "net/http.(*Client).Do", so everything
        # from the first paren not part of "(anonymous namespace)" is noise
        func = args_pat.sub('', func, count=1)
    # now tidy this horrible thing:
    #   13a80b608e0a RegExp:[&<>\"\'] (/tmp/perf-7539.map)
    return quotes_pat.sub('', func)

def tidy_java(func):
    # along with tidy_generic, converts
    #   Lorg/mozilla/javascript/MemberBox;.<init>(Ljava/lang/reflect/Method;)V
    # into
    #   org/mozilla/javascript/MemberBox:.<init>
    if '/' in func and func.startswith('L'):
        func = func[1:]
    return func

def annotation(module, inlined, opts):
    """At most one marker per frame: inlined, then kernel, then jitted."""
    if inlined:
        return INLINED
    if opts.annotate_kernel and is_kernel_module(module):
        return KERNEL
    if opts.annotate_jit and is_jit_module(module):
        return JITTED
    return ''


def normalize(func, pc, module, label, opts, inlined=False):
    """Turn one component of a frame line's function text into a frame."""
    if func == UNKNOWN:
        func = unknown_symbol(module, pc, opts.include_addrs)
    if opts.tidy_generic:
        func = tidy_generic(func)
    if opts.tidy_java and is_java_label(label):
        func = tidy_java(func)
    return func + annotation(module, inlined, opts)

def frames(rawfunc, pc, module, label, opts):
    """Frames for the function text of one frame line. Text like
    "outer->inner" is an inline chain; every entry after the
    first is marked as inlined. Returned in root-first order."""
    parts = rawfunc.split('->')
    while parts and not parts[-1]:
        parts.pop()
    result = []
    for func in parts:
        result.append(normalize(func, pc, module, label, opts, inlined=len(result) > 0))
    return result
