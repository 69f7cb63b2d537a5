"""
查询日志适配器 - 实现 QueryLogPort

使用 JSON Lines 文件存储，每条查询一行，只追加。
文件 IO 放到工作线程中执行，避免阻塞事件循环。
"""

import asyncio
import json
import logging
import os
from typing import List, Optional

from cryptosight.domain.models import CommandKind, QueryLogEntry
from cryptosight.ports.interfaces import QueryLogPort


logger = logging.getLogger(__name__)


class JsonlQueryLogAdapter(QueryLogPort):
    """
    JSON Lines 查询日志

    写入通过 asyncio.Lock 串行化；读取时跳过损坏的行。
    """

    def __init__(self, path: str = "data/query_log.jsonl"):
        self.path = path
        directory = os.path.dirname(path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        self._lock = asyncio.Lock()

    async def log_query(self, entry: QueryLogEntry) -> None:
        """追加一条查询记录"""
        line = json.dumps(entry.to_dict(), ensure_ascii=False, default=str)
        async with self._lock:
            await asyncio.to_thread(self._append_line, line)

    def _append_line(self, line: str) -> None:
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(line + "\n")

    async def get_recent_queries(
        self,
        command: CommandKind,
        token_address: Optional[str] = None,
        token_id: Optional[str] = None,
        limit: int = 50,
    ) -> List[QueryLogEntry]:
        """按命令类型（及可选的地址、代币 ID）读取最近的记录，新的在前"""
        entries = await asyncio.to_thread(self._read_entries)

        matched = [
            entry for entry in entries
            if entry.command == command
            and (token_address is None or entry.token_address == token_address)
            and (token_id is None or entry.token_id == token_id)
        ]
        matched.sort(key=lambda e: e.created_at, reverse=True)
        return matched[:limit]

    def _read_entries(self) -> List[QueryLogEntry]:
        if not os.path.exists(self.path):
            return []

        entries = []
        with open(self.path, 'r', encoding='utf-8') as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(QueryLogEntry.from_dict(json.loads(line)))
                except (ValueError, KeyError) as e:
                    logger.warning(f"跳过损坏的查询日志行 {self.path}:{line_no}: {e}")
        return entries
