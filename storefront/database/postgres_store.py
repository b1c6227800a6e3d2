import asyncpg
import json
from typing import Any, Dict, List, Optional
import logging
from config import settings
from storefront.models.checkout import CartItem, Order, OrderStatus

logger = logging.getLogger(__name__)

ORDER_COLUMNS = """
    id, customer_name, customer_email, customer_address,
    items, total, status, payment_id, created_at
"""

class PostgresStore:
    def __init__(self):
        self.connection_string = settings.DATABASE_URL
        self.pool = None

    async def init_pool(self):
        """Initialize connection pool"""
        try:
            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=2,
                max_size=10,
                command_timeout=60
            )
            logger.info("[Database] Connection pool initialized")
            await self.init_tables()
        except Exception as e:
            logger.error(f"[Database] Failed to initialize pool: {e}")
            raise

    async def init_tables(self):
        """Create tables if they don't exist"""
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS orders (
                    id VARCHAR(64) PRIMARY KEY,
                    customer_name VARCHAR(255) NOT NULL,
                    customer_email VARCHAR(255) NOT NULL,
                    customer_address TEXT NOT NULL,
                    items JSONB NOT NULL DEFAULT '[]',
                    total DOUBLE PRECISION NOT NULL,
                    status VARCHAR(20) NOT NULL DEFAULT 'pending',
                    payment_id VARCHAR(255) NOT NULL,
                    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
                );

                CREATE INDEX IF NOT EXISTS idx_orders_status
                ON orders(status);

                CREATE INDEX IF NOT EXISTS idx_orders_created_at
                ON orders(created_at);
            """)
            logger.info("[Database] Tables initialized")

    async def create_order(self, order: Order) -> Order:
        """Persist a newly paid order"""
        async with self.pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO orders
                (id, customer_name, customer_email, customer_address, items, total, status, payment_id, created_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            """,
                order.id,
                order.customer_name,
                order.customer_email,
                order.customer_address,
                json.dumps([item.model_dump() for item in order.items]),
                order.total,
                order.status.value,
                order.payment_id,
                order.created_at
            )
            logger.info(f"[Database] Created order {order.id} for payment {order.payment_id}")
            return order

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by id"""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE id = $1
            """, order_id)

            if row:
                return row_to_order(row)
            return None

    async def list_orders(self) -> List[Order]:
        """All orders, newest first"""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                ORDER BY created_at DESC
            """)
            return [row_to_order(row) for row in rows]

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """Set any status on an order; transitions are not validated"""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                UPDATE orders
                SET status = $1, updated_at = NOW()
                WHERE id = $2
                RETURNING {ORDER_COLUMNS}
            """, status.value, order_id)

            if row:
                logger.info(f"[Database] Updated status for order {order_id} to {status.value}")
                return row_to_order(row)
            logger.warning(f"[Database] No order found for {order_id}")
            return None

    async def order_statistics(self, total_products: int) -> Dict[str, Any]:
        """Dashboard figures; cancelled orders do not count towards revenue"""
        async with self.pool.acquire() as conn:
            stats = await conn.fetchrow("""
                SELECT
                    COUNT(*) as total_orders,
                    COALESCE(SUM(total) FILTER (WHERE status != 'cancelled'), 0) as total_revenue,
                    COUNT(*) FILTER (WHERE status = 'pending') as pending_orders
                FROM orders
            """)
            return {
                "total_orders": stats["total_orders"],
                "total_revenue": float(stats["total_revenue"]),
                "pending_orders": stats["pending_orders"],
                "total_products": total_products,
            }

    async def close(self):
        """Close connection pool"""
        if self.pool:
            await self.pool.close()
            logger.info("[Database] Connection pool closed")


def row_to_order(row) -> Order:
    items = row["items"]
    if isinstance(items, str):
        items = json.loads(items)
    return Order(
        id=row["id"],
        customer_name=row["customer_name"],
        customer_email=row["customer_email"],
        customer_address=row["customer_address"],
        items=[CartItem(**item) for item in items],
        total=row["total"],
        status=OrderStatus(row["status"]),
        payment_id=row["payment_id"],
        created_at=row["created_at"],
    )

# Global instance
postgres_store = PostgresStore()
