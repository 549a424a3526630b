import io
import logging
import sys

from perfcollapse import config
from perfcollapse.inline import Addr2lineResolver
from perfcollapse.perfscript import CollapseState, collapse

logger = logging.getLogger('perfcollapse')

# symbols are bytes, not necessarily utf-8; undecodable bytes must come
# back out unchanged and must not merge distinct stacks
encoding = 'utf-8'
errors = 'surrogateescape'


def read_input(name, state):
    if name == '-':
        f = io.TextIOWrapper(sys.stdin.buffer, encoding=encoding, errors=errors)
        try:
            collapse(f, state=state)
        finally:
            # leave stdin open for another '-'
            f.detach()
    else:
        with open(name, encoding=encoding, errors=errors) as f:
            collapse(f, state=state)


def write_output(name, folded):
    if name:
        with open(name, 'w', encoding=encoding, errors=errors) as out:
            folded.write(out)
    else:
        sys.stdout.flush()
        out = io.TextIOWrapper(sys.stdout.buffer, encoding=encoding, errors=errors)
        try:
            folded.write(out)
            out.flush()
        finally:
            out.detach()


def main(argv=None):
    args = config.parser().parse_args(argv)
    config.setup_logging(args)
    opts = config.options_from_args(args)
    logger.debug('options: %s', opts)

    resolver = None
    if opts.show_inline:
        resolver = Addr2lineResolver(opts.show_context, args.addr2line)
    state = CollapseState(opts, resolver)

    status = 0
    for name in args.infile or ['-']:
        try:
            read_input(name, state)
        except IOError as e:
            logger.error('cannot read %s: %s', name, e)
            status = 1
            break

    logger.info('%d distinct stacks, %d lines read', len(state.folded), state.lineno)

    write_output(args.output, state.folded)
    return status


if __name__ == '__main__':
    sys.exit(main())
