"""
Dataset loader (storm table -> StormEvent list)
===============================================

This module reads the NOAA storm-events export and converts each row into a
`StormEvent` object.

Key ideas:
- Column names are matched tolerantly (case and punctuation are ignored),
  because the table circulates under slightly different headers.
- Conversion helpers turn blank or unreadable numbers into None; they are
  not guessed here. The aggregator counts them as anomalies.
- Compressed CSV (.bz2/.gz/.zip) is decompressed by pandas; .xlsx goes
  through openpyxl.
- The loader returns a list of immutable records; SIRE never edits the file.
"""

from __future__ import annotations
import logging
import os
import re
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .exponents import parse_code
from .models import StormEvent

logger = logging.getLogger(__name__)

class MissingColumnError(KeyError):
    pass

# field -> accepted header spellings (first one is the NOAA name)
REQUIRED_COLUMNS: Dict[str, Sequence[str]] = {
    "event_type": ("EVTYPE", "EVENT_TYPE", "Event Type"),
    "fatalities": ("FATALITIES", "Deaths", "Deaths Direct"),
    "injuries": ("INJURIES", "Injuries Direct"),
    "prop_dmg": ("PROPDMG", "Property Damage"),
    "prop_dmg_exp": ("PROPDMGEXP", "Property Damage Exp"),
    "crop_dmg": ("CROPDMG", "Crop Damage"),
    "crop_dmg_exp": ("CROPDMGEXP", "Crop Damage Exp"),
}

OPTIONAL_COLUMNS: Dict[str, Sequence[str]] = {
    "begin_date": ("BGN_DATE", "BEGIN_DATE"),
    "state": ("STATE",),
}

EXCEL_SUFFIXES = (".xlsx", ".xlsm")

NA_VALUES = [""]

def _to_float(x) -> Optional[float]:
    """Convert a cell to float, returning None if missing/invalid."""
    if pd.isna(x): return None
    try: return float(x)
    except (TypeError, ValueError): return None

def _to_label(x) -> str:
    if pd.isna(x): return ""
    return str(x)

def _to_str(x) -> str:
    if pd.isna(x): return ""
    return str(x).strip()

def _to_code(x) -> str:
    return parse_code(x).strip()

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _find_col(columns: Sequence[str], names: Sequence[str]) -> Optional[str]:
    cols = list(columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    return None

def resolve_columns(columns: Sequence[str]) -> Dict[str, str]:
    """Map StormEvent field names to the matching headers in `columns`."""
    out: Dict[str, str] = {}
    for fname, names in REQUIRED_COLUMNS.items():
        c = _find_col(columns, names)
        if c is None:
            raise MissingColumnError(f"Missing required column. Tried={tuple(names)}. Available={list(columns)}")
        out[fname] = c
    for fname, names in OPTIONAL_COLUMNS.items():
        c = _find_col(columns, names)
        if c is not None:
            out[fname] = c
    return out

def load_storm_frame(df: pd.DataFrame) -> List[StormEvent]:
    """Convert an already-loaded DataFrame into StormEvent records."""
    df = df.rename(columns={c: str(c).strip() for c in df.columns})
    cols = resolve_columns(list(df.columns))

    def column(fname: str, conv) -> list:
        if fname not in cols:
            return [""] * len(df)
        return [conv(v) for v in df[cols[fname]].tolist()]

    rows = zip(
        column("event_type", _to_label),
        column("fatalities", _to_float),
        column("injuries", _to_float),
        column("prop_dmg", _to_float),
        column("prop_dmg_exp", _to_code),
        column("crop_dmg", _to_float),
        column("crop_dmg_exp", _to_code),
        column("begin_date", _to_str),
        column("state", _to_str),
    )
    events: List[StormEvent] = []
    for i, (etype, fat, inj, pdmg, pexp, cdmg, cexp, bdate, state) in enumerate(rows):
        events.append(StormEvent(
            event_id=i,
            event_type=etype,
            fatalities=fat,
            injuries=inj,
            prop_dmg=pdmg,
            prop_dmg_exp=pexp,
            crop_dmg=cdmg,
            crop_dmg_exp=cexp,
            begin_date=bdate,
            state=state,
        ))
    return events

def load_storm_file(path: str) -> List[StormEvent]:
    """Load a storm-events CSV (optionally compressed) or Excel export."""
    # only empty cells are missing: "NA", "NULL" etc. are real labels, and
    # in numeric columns they are left for the aggregator to count
    if path.lower().endswith(EXCEL_SUFFIXES):
        df = pd.read_excel(path, engine="openpyxl", keep_default_na=False, na_values=NA_VALUES)
    else:
        # label and codes stay text so "0".."8" are not turned into numbers
        header = pd.read_csv(path, nrows=0).columns
        cols = resolve_columns([str(c).strip() for c in header])
        text_fields = (cols["event_type"], cols["prop_dmg_exp"], cols["crop_dmg_exp"])
        text_cols = {c for c in header if str(c).strip() in text_fields}
        df = pd.read_csv(path, dtype={c: str for c in text_cols}, keep_default_na=False,
                         na_values=NA_VALUES, low_memory=False)
    logger.info("Read %d rows from %s", len(df), os.path.basename(path))
    return load_storm_frame(df)
