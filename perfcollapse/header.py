import logging
import re
import time
from datetime import datetime

import dateutil.parser
import pytz

logger = logging.getLogger(__name__)

#
# "perf script --header" starts with comment lines describing the capture:
#   # captured on    : Thu Jan  5 12:00:00 2017
#   # hostname : myhost
#   # cmdline : /usr/bin/perf record -F 99 -a -g -- sleep 30
#   # event : name = cpu-clock, , type = 1, size = 112, ...
# none of it changes the folded output
#

field_pat = re.compile(r'^#\s*(\w[\w ]*?)\s*:\s(.*)$')


def get_time(t):
    t = dateutil.parser.parse(t)
    if not t.tzinfo:
        tz = datetime(*time.gmtime()[:6]) - datetime(*time.localtime()[:6])
        t = pytz.utc.localize(t + tz)
    return t


class TraceHeader:

    def __init__(self):
        self.fields = {}
        self.events = []
        self.captured = None

    def add(self, line):
        m = field_pat.match(line)
        if not m:
            return False
        key, value = m.group(1), m.group(2).strip()
        if key == 'event':
            self.events.append(value)
        elif key not in self.fields:
            self.fields[key] = value
            if key == 'captured on':
                try:
                    self.captured = get_time(value)
                except (ValueError, OverflowError) as e:
                    logger.warning('bad capture time %r: %s', value, e)
                else:
                    logger.info('trace captured on %s', self.captured.isoformat())
        return True

    def get(self, key, default=None):
        return self.fields.get(key, default)
