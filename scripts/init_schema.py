#!/usr/bin/env python3
"""
Create and seed the demo `items` and `users` tables in the target MySQL database.
Run this once before starting the API against an empty database.
"""
import asyncio
import os

import aiomysql
from dotenv import load_dotenv

load_dotenv()

DB_HOST = os.getenv("TARGET_DB_HOST", "localhost")
DB_PORT = int(os.getenv("TARGET_DB_PORT", "3306"))
DB_NAME = os.getenv("TARGET_DB_NAME", "golang")
DB_USER = os.getenv("TARGET_DB_USER", "root")
DB_PASSWORD = os.getenv("TARGET_DB_PASSWORD", "")


STATEMENTS = [
    "DROP TABLE IF EXISTS `items`",
    """
    CREATE TABLE `items` (
      `id` int(11) NOT NULL AUTO_INCREMENT,
      `title` varchar(255) NOT NULL,
      `description` text NOT NULL,
      `updated` varchar(255) DEFAULT NULL,
      PRIMARY KEY (`id`)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
    """,
    """
    INSERT INTO `items` (`title`, `description`, `updated`) VALUES
    ('database/sql', 'Talk about databases', 'rvasily'),
    ('memcache', 'Talk about memcache with a usage example', NULL)
    """,
    "DROP TABLE IF EXISTS `users`",
    """
    CREATE TABLE `users` (
      `user_id` int(11) NOT NULL AUTO_INCREMENT,
      `login` varchar(255) NOT NULL,
      `password` varchar(255) NOT NULL,
      `email` varchar(255) NOT NULL,
      `info` text NOT NULL,
      `updated` varchar(255) DEFAULT NULL,
      PRIMARY KEY (`user_id`)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
    """,
    """
    INSERT INTO `users` (`login`, `password`, `email`, `info`, `updated`) VALUES
    ('rvasily', 'love', 'rvasily@example.com', 'none', NULL)
    """,
]


async def init_schema():
    """Create the demo tables"""
    conn = await aiomysql.connect(
        host=DB_HOST,
        port=DB_PORT,
        user=DB_USER,
        password=DB_PASSWORD,
        db=DB_NAME,
        autocommit=True,
        charset="utf8mb4",
    )
    try:
        async with conn.cursor() as cursor:
            for statement in STATEMENTS:
                await cursor.execute(statement)
                print(f"✓ {statement.strip().splitlines()[0][:60]}")
    finally:
        conn.close()

    print("\nDemo schema initialized")


if __name__ == "__main__":
    asyncio.run(init_schema())
