from datetime import datetime, timezone



# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()


# UTC timestamp that is safe to drop into a filename, such as 2026-10-19T14-03-11. Colons are swapped for
# dashes since Windows won't have them in paths.
def export_timestamp(dt=None):
    dt = dt or datetime.now(timezone.utc)
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="seconds")[:19].replace(":", "-")


# Parses user-typed durations into milliseconds. Accepts HH:MM:SS, MM:SS, or a bare number of minutes. Returns
# None for anything unparseable or negative.
def parse_duration(text):
    parts = text.strip().split(":")
    try:
        if len(parts) == 3:
            seconds = int(parts[0]) * 3600 + int(parts[1]) * 60 + int(parts[2])
        elif len(parts) == 2:
            seconds = int(parts[0]) * 60 + int(parts[1])
        elif len(parts) == 1:
            seconds = int(parts[0]) * 60
        else:
            return None
    except ValueError:
        return None
    if seconds < 0 or any(p.strip().startswith("-") for p in parts):
        return None
    return seconds * 1000
