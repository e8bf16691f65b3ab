import io
import logging
import warnings

import pandas as pd

logger = logging.getLogger(__name__)


class StudentImportError(ValueError):
    pass


def _clean(value):
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def read_students_csv(source):
    """Read ``(name, email)`` pairs from a headerless CSV.

    ``source`` is a path, a file object or raw bytes. The first column is
    the name, the optional second column the email. Rows without a name
    are skipped.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        with warnings.catch_warnings():
            # rows with extra columns are truncated to name, email
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                source,
                header=None,
                names=["name", "email"],
                index_col=False,
                dtype=str,
                engine="python",
                skip_blank_lines=True,
                skipinitialspace=True,
            )
    except pd.errors.EmptyDataError:
        return []
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise StudentImportError(f"CSV read failed: {e}") from e

    students = []
    for _, row in df.iterrows():
        name = _clean(row["name"])
        if not name:
            continue
        students.append((name, _clean(row["email"])))

    logger.info("Read %d students from CSV", len(students))
    return students


def parse_manual_entry(text):
    """One student per line, ``name`` or ``name,email``."""
    students = []
    for line in (text or "").splitlines():
        parts = [p.strip() for p in line.split(",")]
        if not parts[0]:
            continue
        email = parts[1] if len(parts) > 1 else ""
        students.append((parts[0], email))
    return students
