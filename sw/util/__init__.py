from sw.util.misc import now_iso, export_timestamp, parse_duration

__all__ = ["now_iso", "export_timestamp", "parse_duration"]
