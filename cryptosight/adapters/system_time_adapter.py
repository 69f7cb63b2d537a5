"""
系统时间适配器 - 实现 TimePort

日期键（如市场趋势缓存）统一使用 UTC 日期。
"""

from datetime import datetime, timezone

from cryptosight.ports.interfaces import TimePort


class SystemTimeAdapter(TimePort):
    """
    系统时间适配器

    实现 TimePort 接口，提供时间相关服务。
    """

    def get_current_datetime(self) -> datetime:
        """获取当前 UTC 日期时间"""
        return datetime.now(timezone.utc)

    def get_date(self) -> str:
        """获取当前日期（YYYY-MM-DD）"""
        return self.get_current_datetime().strftime("%Y-%m-%d")
