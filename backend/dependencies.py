# backend/dependencies.py

from fastapi import Request

from config import Settings
from services.sleeper_client import SleeperClient
from services.warehouse import Warehouse


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_warehouse(request: Request) -> Warehouse:
    return request.app.state.warehouse


def get_sleeper(request: Request) -> SleeperClient:
    return request.app.state.sleeper
