"""CSV tokenizer for spreadsheet exports.

Google Sheets exports multi-line cells as quoted fields containing raw
newlines, and the export mixes ``\\r\\n`` and ``\\n`` depending on the client.
The tokenizer is purely mechanical: it attaches no meaning to any row.
"""

import csv
import io


def tokenize(text: str) -> list[list[str]]:
    """Split CSV text into rows of fields.

    - ``,`` separates fields, ``\\n`` or ``\\r\\n`` separates records.
    - Inside quotes, commas and newlines are literal and a doubled quote is
      one quote character.
    - A final record without a terminator is still returned; a trailing
      terminator does not add an empty row. A blank line is one empty field.

    Examples:
        >>> tokenize('"a,b",c')
        [['a,b', 'c']]
        >>> tokenize("a\\n\\nb")
        [['a'], [''], ['b']]
    """
    # Sometimes starts with BOM
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.reader(io.StringIO(text, newline=""))
    return [row or [""] for row in reader]
