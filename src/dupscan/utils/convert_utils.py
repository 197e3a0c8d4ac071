"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""


class ConvertUtils:
    UNITS = ["KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]

    @staticmethod
    def bytes_to_human(size_bytes: float) -> str:
        """
        Convert bytes to human-readable string with binary units (e.g., 512 B, 1.50 KiB, 3.20 MiB).
        """
        if size_bytes < 0:
            return "0 B"
        if size_bytes < 1024:
            return f"{int(size_bytes)} B"

        scaled = float(size_bytes)
        unit = None
        for unit in ConvertUtils.UNITS:
            scaled /= 1024
            if scaled < 1024:
                break
        return f"{scaled:.2f} {unit}"

    @staticmethod
    def bytes_to_human_detailed(size_bytes: int) -> str:
        """Like bytes_to_human, but keeps the exact byte count for sizes >= 1 KiB: '1.50 KiB (1536 B)'."""
        human = ConvertUtils.bytes_to_human(size_bytes)
        if size_bytes >= 1024:
            return f"{human} ({size_bytes} B)"
        return human

    @staticmethod
    def rate_to_human(bytes_per_second: float) -> str:
        """Throughput such as '12.34 MiB/s'; 0 B/s when nothing was measured."""
        return f"{ConvertUtils.bytes_to_human(round(bytes_per_second))}/s"
