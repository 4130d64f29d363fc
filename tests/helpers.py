"""Identity helpers shared by the tests."""
from dashchat.models import Actor, Employee
from dashchat.routes.auth import create_token


def actor_for(employee: Employee) -> Actor:
    return Actor(user_id=employee.id, role=employee.role)


def token_for(employee: Employee) -> str:
    return create_token(employee.id, employee.role.value)


def headers_for(employee: Employee) -> dict:
    return {"Authorization": f"Bearer {token_for(employee)}"}
