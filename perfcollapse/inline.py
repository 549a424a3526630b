import logging
import re
import subprocess

logger = logging.getLogger(__name__)

discriminator_pat = re.compile(r' \(discriminator \S+\)')


class Addr2lineResolver:
    """Un-inline an address with addr2line.

    Called with a program counter and the module it belongs to, returns
    the chain of functions inlined at that address, outermost first.
    With show_context each name carries its source location, as
    "name:file.c:123". Any failure yields an empty chain.
    """

    def __init__(self, show_context=False, command='addr2line'):
        self.show_context = show_context
        self.command = command

    def args(self, pc, module):
        return [self.command, '-a', pc, '-e', module, '-i', '-f', '-s', '-C']

    def run(self, pc, module):
        try:
            proc = subprocess.run(self.args(pc, module), stdout=subprocess.PIPE,
                                  stderr=subprocess.PIPE, universal_newlines=True)
        except OSError as e:
            logger.debug('%s failed for %s in %s: %s', self.command, pc, module, e)
            return ''
        if proc.returncode != 0:
            logger.debug('%s exited %d for %s in %s: %s', self.command,
                         proc.returncode, pc, module, proc.stderr.strip())
            return ''
        return proc.stdout

    def parse(self, output):
        # first line echoes the address, then function and location pairs
        # from the innermost function outwards
        chain = []
        lines = output.splitlines()[1:]
        for func, where in zip(lines[0::2], lines[1::2]):
            where = discriminator_pat.sub('', where)
            if self.show_context:
                chain.append('%s:%s' % (func, where))
            else:
                chain.append(func)
        chain.reverse()
        return chain

    def __call__(self, pc, module):
        return self.parse(self.run(pc, module))
