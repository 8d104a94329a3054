"""Tests for question and legacy answer CRUD."""

import json

import pytest
from httpx import AsyncClient

from app.models.question import Question
from tests.helpers import (
    SUPER_ADMIN,
    as_user,
    count_rows,
    create_answer,
    create_question,
    create_topic,
    create_user,
    question_body,
)


@pytest.mark.asyncio
async def test_create_question_requires_existing_topic(client: AsyncClient) -> None:
    response = await client.post(
        "/api/questions", json={"title": "Q", "topicId": 42}, headers=SUPER_ADMIN
    )
    assert response.status_code == 400
    assert response.json()["message"] == "topic does not exist"


@pytest.mark.asyncio
async def test_create_and_filter_questions(client: AsyncClient) -> None:
    manager_id = await create_user(role="quiz_manager")
    maths = await create_topic("Maths")
    history = await create_topic("History")

    first = await client.post(
        "/api/questions",
        json={"title": "1+1?", "body": question_body(maths, 2), "topicId": maths},
        headers=as_user(manager_id),
    )
    second = await client.post(
        "/api/questions", json={"title": "2+2?", "body": question_body(maths, 4), "topicId": maths},
        headers=as_user(manager_id),
    )
    await client.post("/api/questions", json={"title": "1066?", "topicId": history}, headers=as_user(manager_id))
    orphan = await client.post("/api/questions", json={"title": "Loose"}, headers=as_user(manager_id))
    assert orphan.status_code == 201

    listed = (await client.get("/api/questions", params={"topicId": maths})).json()
    assert [q["id"] for q in listed] == [second.json()["id"], first.json()["id"]]
    assert listed[0]["created_by"] == manager_id

    everything = (await client.get("/api/questions")).json()
    assert len(everything) == 4
    assert everything[0]["topic_id"] is None


@pytest.mark.asyncio
async def test_rejects_out_of_range_correct_option(client: AsyncClient) -> None:
    topic_id = await create_topic()
    response = await client.post(
        "/api/questions",
        json={"title": "Q", "body": question_body(topic_id, 5), "topicId": topic_id},
        headers=SUPER_ADMIN,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("correct_option", [True, 2.0, "2", None])
async def test_rejects_non_integer_correct_option(client: AsyncClient, correct_option) -> None:
    topic_id = await create_topic()
    body = json.dumps({"topic_id": topic_id, "option1": "A", "option2": "B", "correct_option": correct_option})
    response = await client.post(
        "/api/questions", json={"title": "Q", "body": body, "topicId": topic_id}, headers=SUPER_ADMIN
    )
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "body"
    assert await count_rows(Question) == 0


@pytest.mark.asyncio
async def test_rejects_non_text_options(client: AsyncClient) -> None:
    body = json.dumps({"option1": 1, "option2": 2, "correct_option": 1})
    response = await client.post("/api/questions", json={"title": "Q", "body": body}, headers=SUPER_ADMIN)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_question(client: AsyncClient) -> None:
    topic_id = await create_topic()
    question_id = await create_question(topic_id, correct_option=1)

    response = await client.put(
        f"/api/questions/{question_id}",
        json={"title": "Edited", "body": question_body(topic_id, 3), "topicId": topic_id},
        headers=SUPER_ADMIN,
    )
    assert response.status_code == 200
    question = (await client.get(f"/api/questions/{question_id}")).json()
    assert question["title"] == "Edited"
    assert '"correct_option": 3' in question["body"]

    response = await client.put(
        f"/api/questions/{question_id}", json={"title": "Edited", "topicId": 999}, headers=SUPER_ADMIN
    )
    assert response.status_code == 400

    response = await client.put("/api/questions/999", json={"title": "Nope"}, headers=SUPER_ADMIN)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_question_cascades_answers(client: AsyncClient) -> None:
    topic_id = await create_topic()
    question_id = await create_question(topic_id)
    await create_answer(question_id)
    await create_answer(question_id, is_correct=True)

    response = await client.delete(f"/api/questions/{question_id}", headers=SUPER_ADMIN)
    assert response.status_code == 200
    assert await count_rows(Question, id=question_id) == 0
    assert (await client.get(f"/api/questions/{question_id}/answers")).json() == []


@pytest.mark.asyncio
async def test_answer_crud(client: AsyncClient) -> None:
    manager_id = await create_user(role="quiz_manager")
    topic_id = await create_topic()
    question_id = await create_question(topic_id)
    headers = as_user(manager_id)

    created = await client.post(
        f"/api/questions/{question_id}/answers", json={"body": "Paris", "is_correct": True}, headers=headers
    )
    assert created.status_code == 201
    answer_id = created.json()["id"]
    await client.post(f"/api/questions/{question_id}/answers", json={"body": "Lyon"}, headers=headers)

    answers = (await client.get(f"/api/questions/{question_id}/answers")).json()
    assert [(a["body"], a["is_correct"]) for a in answers] == [("Paris", True), ("Lyon", False)]

    response = await client.put(f"/api/answers/{answer_id}", json={"body": "Paris, France", "is_correct": True},
                                headers=headers)
    assert response.status_code == 200

    response = await client.delete(f"/api/answers/{answer_id}", headers=headers)
    assert response.status_code == 200
    answers = (await client.get(f"/api/questions/{question_id}/answers")).json()
    assert [a["body"] for a in answers] == ["Lyon"]


@pytest.mark.asyncio
async def test_answer_for_missing_question(client: AsyncClient) -> None:
    response = await client.post("/api/questions/999/answers", json={"body": "x"}, headers=SUPER_ADMIN)
    assert response.status_code == 404
    response = await client.delete("/api/answers/999", headers=SUPER_ADMIN)
    assert response.status_code == 404
