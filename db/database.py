from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from core.config import AppSettings


def create_motor_client(settings: AppSettings) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.mongo_uri, appname="barbershop-booking")


def get_database(client: AsyncIOMotorClient, settings: AppSettings) -> AsyncIOMotorDatabase:
    return client[settings.database_name]


def close_client(client: AsyncIOMotorClient | None) -> None:
    if client is not None:
        client.close()
