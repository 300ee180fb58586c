import re

class LineNormalizer:
    """
    Scrubs raw WeeChat log lines before they reach the parser.
    Removes formatting codes and control characters, collapses whitespace
    and blanks whitespace-only reasons so optional fields are truly empty.
    """
    # Colour: \x03 followed by optional "fg[,bg]"
    COLOR_PATTERN = re.compile(r'\x03(?:\d{1,2}(?:,\d{1,2})?)?')
    # Bold, reset, reverse, italic, underline, strikethrough, monospace
    FORMAT_PATTERN = re.compile(r'[\x02\x0f\x16\x1d\x1e\x1f\x11]')
    # Remaining C0/C1 control characters, tab excluded
    CONTROL_PATTERN = re.compile(r'[\x00-\x08\x0a-\x1f\x7f-\x9f]')
    WHITESPACE_PATTERN = re.compile(r'\s+')
    EMPTY_REASON_PATTERN = re.compile(r'\(\s+\)')

    def normalize(self, line: str) -> str:
        if not line:
            return ''

        line = self.COLOR_PATTERN.sub('', line)
        line = self.FORMAT_PATTERN.sub('', line)
        line = self.CONTROL_PATTERN.sub('', line)
        line = self.WHITESPACE_PATTERN.sub(' ', line).strip()
        return self.EMPTY_REASON_PATTERN.sub('()', line)
