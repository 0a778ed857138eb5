"""
Basic example of generating insert mutations with RowQL.

This example demonstrates:
- Registering SQLAlchemy declarative models with a RowSchema
- Running the generated ``insert<Type>`` mutations against SQLite
- Reading the inserted node, its edge cursor and the echoed clientMutationId
"""

import asyncio
import logging

from sqlalchemy import Column, ForeignKey, Integer, String, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from rowql import RowQLConfig, RowSchema, parse_cursor


# SQLAlchemy Models
class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, comment='Public display name')
    email = Column(String(255), unique=True, nullable=False)
    karma = Column(Integer, nullable=False, server_default=text('1'))


class Post(Base):
    __tablename__ = 'posts'

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    author_id = Column(Integer, ForeignKey('users.id'), nullable=False)


# RowQL schema: one insert mutation per registered model
rows = RowSchema(RowQLConfig(dialect='sqlite'))
rows.register(User)
rows.register(Post)
schema = rows.to_strawberry()

INSERT_USER = """
mutation($input: InsertUserInput!) {
  insertUser(input: $input) {
    clientMutationId
    user { id name email karma }
    userEdge { cursor }
  }
}
"""

INSERT_POST = """
mutation($input: InsertPostInput!) {
  insertPost(input: $input) {
    post { id title authorId }
    byTitle: postEdge(orderBy: TITLE) { cursor }
  }
}
"""


async def main():
    """Main demo function."""
    logging.basicConfig(level=logging.INFO)
    logging.getLogger("rowql").setLevel(logging.DEBUG)

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    print(schema.as_str())

    async with async_session() as session:
        result = await schema.execute(
            INSERT_USER,
            variable_values={'input': {'name': 'Alice', 'email': 'alice@example.com', 'clientMutationId': 'demo-1'}},
            context_value={'db_session': session},
        )
        if result.errors:
            print("Errors:", result.errors)
            return
        payload = result.data['insertUser']
        print("Inserted user:", payload['user'])
        print("Edge cursor:", payload['userEdge']['cursor'], '->', parse_cursor(payload['userEdge']['cursor']))

        result = await schema.execute(
            INSERT_POST,
            variable_values={'input': {'title': 'Hello', 'authorId': payload['user']['id']}},
            context_value={'db_session': session},
        )
        print("Inserted post:", result.data['insertPost'] if not result.errors else result.errors)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
