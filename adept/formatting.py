r"""
adept help text formatter.

Turns an option's help template into display-ready text:
- words(text): split into whitespace-delimited words.
- substitute(words, values): replace "%<index>" placeholders with option values.
- render(option, start, indent, wrap): header + greedy word-wrapped help body.

Placeholders
- A placeholder is '%' followed by up to D decimal digits, where D is the number
  of digits in len(values) (one value → one digit, ten values → two digits).
- '%' with no digit after it is deleted.
- An index outside the values (index >= len(values)) is deleted.
- Otherwise the placeholder becomes values[index]. The replacement stays inside
  its word, so a value containing spaces still wraps as one unit, and it is never
  rescanned for further placeholders.
- Options without values keep their text untouched.

Layout
    -r, --repo <url>         Specifies the url of the repository to download the
                             libraries from. Current default: maven.google.com
    ^ start indent           ^ start indent + text indent            wrap column ^
"""
import re

PLACEHOLDER = "%"


def words(text, /):
    """
    Split text into whitespace-delimited words (runs of whitespace are separators).
    """
    if not isinstance(text, str):
        raise TypeError("words() argument must be a string")
    return text.split()


def substitute(words, values, /):
    """
    Replace placeholders in each word with the matching value.

    Parameters
    - words: list[str]
      Tokenized help text.
    - values: Sequence[str]
      Bound (or default) values of the option being rendered.

    Returns
    - list[str]: a new list; words without placeholders are passed through unchanged.
    """
    if not values or not words:
        return list(words)

    pattern = re.compile(r"%s(\d{0,%d})" % (re.escape(PLACEHOLDER), len(str(len(values)))))

    def replace(match):
        if not (digits := match.group(1)):
            return ""
        if (index := int(digits)) >= len(values):
            return ""
        return values[index]

    return [pattern.sub(replace, word) for word in words]


def header(option, start_indent, /):
    """
    Build the leading "  -s, --long <arg> " part of an option's help line.
    """
    labels = ", ".join(label for label in (option.short, option.long) if label)
    return " " * start_indent + labels + "".join(" <%s>" % label for label in option.metavars) + " "


def render(option, start_indent, text_indent, wrap_column, /):
    """
    Render the formatted help text of an option.

    Parameters
    - option: Option
      Provides short/long labels, metavars, descr (the template) and values.
    - start_indent: int
      Number of spaces before the labels.
    - text_indent: int
      Column of the help text, relative to start_indent.
    - wrap_column: int
      Lines are wrapped on whitespace once they reach this column. A word longer
      than the usable width (wrap_column - start_indent - text_indent) is split,
      filling its line exactly to wrap_column.

    Returns
    - str: the formatted text with embedded newlines and no trailing newline.

    Raises
    - ValueError: when wrap_column leaves no room for text.

    Notes
    - Placeholders read option.values, so help rendered after parsing shows the
      user-supplied values rather than the construction-time defaults.
    """
    if min(start_indent, text_indent) < 0:
        raise ValueError("render() indents cannot be negative")
    column = start_indent + text_indent
    width = wrap_column - column
    if width <= 0:
        raise ValueError("render() wrap column must be greater than %d" % column)

    pending = substitute(words(option.descr or ""), option.values)
    pending.reverse()  # popped from the end

    formatted = header(option, start_indent)
    if len(formatted) < column:
        formatted += " " * (column - len(formatted))
    current = len(formatted)

    def indent():
        nonlocal formatted
        formatted += "\n" + " " * column
        return column

    while pending:
        word = pending[-1]
        if current >= wrap_column:
            current = indent()
        elif len(word) > width:
            # Long word, print as much as fits and keep the rest pending
            formatted += word[:wrap_column - current]
            pending[-1] = word[wrap_column - current:]
            current = indent()
        elif len(word) < wrap_column - current:
            formatted += word + " "
            current += len(word) + 1
            pending.pop()
        elif current == column:
            # Word exactly as wide as a fresh line, it fills the line up to the wrap column
            formatted += word
            current = wrap_column
            pending.pop()
        else:
            current = indent()

    return formatted


__all__ = (
    "PLACEHOLDER",
    "words",
    "substitute",
    "header",
    "render",
)
