from flask import Blueprint, request, jsonify, g

from models import db
from models.task import Task
from utils.auth_context import login_required
from utils.audit import log_event

tasks_bp = Blueprint("tasks", __name__, url_prefix="/tasks")

TITLE_MAX_LEN = 200


def _own_task_or_none(task_id: int):
    # other users' tasks are reported as missing
    return Task.query.filter_by(id=task_id, user_id=g.user.id).first()


@tasks_bp.post("")
@login_required
def create_task():
    data = request.get_json(silent=True) or {}
    title = data.get("title")
    description = data.get("description")

    if not isinstance(title, str) or not title.strip():
        return jsonify(error="title is required"), 400
    if len(title.strip()) > TITLE_MAX_LEN:
        return jsonify(error=f"title must be at most {TITLE_MAX_LEN} characters"), 400
    if description is not None and not isinstance(description, str):
        return jsonify(error="Invalid description"), 400

    task = Task(user_id=g.user.id, title=title.strip(), description=description, completed=False)
    db.session.add(task)
    db.session.commit()

    log_event("TASK_CREATE", user_id=g.user.id, task_id=task.id)
    return jsonify(task.to_dict()), 201


@tasks_bp.get("")
@login_required
def list_tasks():
    rows = (
        Task.query
        .filter_by(user_id=g.user.id)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )
    return jsonify([t.to_dict() for t in rows]), 200


@tasks_bp.get("/<int:task_id>")
@login_required
def get_task(task_id):
    task = _own_task_or_none(task_id)
    if not task:
        return jsonify(error="Task not found"), 404
    return jsonify(task.to_dict()), 200


@tasks_bp.patch("/<int:task_id>")
@login_required
def update_task(task_id):
    task = _own_task_or_none(task_id)
    if not task:
        return jsonify(error="Task not found"), 404

    data = request.get_json(silent=True) or {}

    if "title" in data:
        title = data.get("title")
        if not isinstance(title, str) or not title.strip() or len(title.strip()) > TITLE_MAX_LEN:
            return jsonify(error="Invalid title"), 400
        task.title = title.strip()

    if "description" in data:
        description = data.get("description")
        if description is not None and not isinstance(description, str):
            return jsonify(error="Invalid description"), 400
        task.description = description

    if "completed" in data:
        completed = data.get("completed")
        if not isinstance(completed, bool):
            return jsonify(error="completed must be a boolean"), 400
        task.completed = completed

    db.session.commit()
    log_event("TASK_UPDATE", user_id=g.user.id, task_id=task.id)
    return jsonify(task.to_dict()), 200


@tasks_bp.delete("/<int:task_id>")
@login_required
def delete_task(task_id):
    task = _own_task_or_none(task_id)
    if not task:
        return jsonify(error="Task not found"), 404

    db.session.delete(task)
    db.session.commit()
    log_event("TASK_DELETE", user_id=g.user.id, task_id=task_id)
    return jsonify(message="Task deleted"), 200
