import collections

sep = ';'


class FoldedStacks:
    """Cumulative count for each distinct folded stack."""

    def __init__(self):
        self.counts = collections.defaultdict(int)

    def __len__(self):
        return len(self.counts)

    def __getitem__(self, stack):
        return self.counts.get(self.key(stack), 0)

    @staticmethod
    def key(stack):
        if isinstance(stack, str):
            return stack
        return sep.join(stack)

    def record(self, stack, weight=1):
        self.counts[self.key(stack)] += weight

    @staticmethod
    def sort_key(item):
        # byte order; same as code point order for valid utf-8, and keeps
        # surrogate-escaped bytes where their raw value puts them
        return item[0].encode('utf-8', 'surrogateescape')

    def items(self):
        return sorted(self.counts.items(), key=self.sort_key)

    def lines(self):
        for stack, count in self.items():
            yield '%s %d' % (stack, count)

    def write(self, out):
        for line in self.lines():
            out.write(line + '\n')
