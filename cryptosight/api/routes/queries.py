"""
查询日志路由 - 最近的地址分析与价格查询记录
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from cryptosight.api.dependencies import get_query_log
from cryptosight.api.schemas import QueryLogRecord
from cryptosight.domain.models import CommandKind
from cryptosight.ports.interfaces import QueryLogPort


router = APIRouter(tags=["Queries"])


async def _recent(
    query_log: QueryLogPort,
    command: CommandKind,
    token_address: Optional[str],
    token_id: Optional[str],
    limit: int,
) -> List[QueryLogRecord]:
    entries = await query_log.get_recent_queries(
        command,
        token_address=token_address,
        token_id=token_id,
        limit=limit,
    )
    return [QueryLogRecord.from_entry(e) for e in entries]


@router.get(
    "/analyze",
    response_model=List[QueryLogRecord],
    summary="最近的地址分析",
    description="按合约地址或代币符号筛选，最新的在前"
)
async def recent_analyses(
    token_address: Optional[str] = Query(default=None, alias="tokenAddress"),
    token_id: Optional[str] = Query(default=None, alias="tokenId"),
    limit: int = Query(default=50, ge=1, le=500),
    query_log: QueryLogPort = Depends(get_query_log),
) -> List[QueryLogRecord]:
    return await _recent(query_log, CommandKind.ANALYZE, token_address, token_id, limit)


@router.get(
    "/price",
    response_model=List[QueryLogRecord],
    summary="最近的价格查询",
    description="按合约地址或代币符号筛选，最新的在前"
)
async def recent_price_queries(
    token_address: Optional[str] = Query(default=None, alias="tokenAddress"),
    token_id: Optional[str] = Query(default=None, alias="tokenId"),
    limit: int = Query(default=50, ge=1, le=500),
    query_log: QueryLogPort = Depends(get_query_log),
) -> List[QueryLogRecord]:
    return await _recent(query_log, CommandKind.PRICE, token_address, token_id, limit)
