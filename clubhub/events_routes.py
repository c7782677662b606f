from flask import Blueprint, jsonify

from clubhub import db
from clubhub.auth.permissions import ANY_MEMBER, MANAGERS, club_role_required
from clubhub.errors import not_found
from clubhub.models import Event
from clubhub.schemas import EventQuerySchema, EventSchema, UpdateEventSchema, parse_args, parse_body
from clubhub.utils import utc_now

# Mounted under /api/clubs/<club_id>/events by the clubs blueprint
events_bp = Blueprint('events', __name__)


def get_event_or_404(club_id, event_id):
    event = Event.query.filter_by(id=event_id, club_id=club_id).first()
    if event is None:
        raise not_found('Event not found')
    return event


@events_bp.route('', methods=['GET'])
@club_role_required(*ANY_MEMBER)
def list_events(club_id):
    """
    List a club's events.

    Query params:
        finished: 'true' or 'false' to filter on completion
        date: 'asc' or 'desc' (default) ordering on the event date
    """
    params = parse_args(EventQuerySchema)

    query = Event.query.filter_by(club_id=club_id)
    # Completion follows the clock, not the stored flag
    if params.finished is True:
        query = query.filter(Event.date < utc_now())
    elif params.finished is False:
        query = query.filter(Event.date >= utc_now())

    order = Event.date.asc() if params.date == 'asc' else Event.date.desc()
    events = query.order_by(order, Event.id).all()

    return jsonify({'events': [e.to_dict() for e in events]})


@events_bp.route('/<id:event_id>', methods=['GET'])
@club_role_required(*ANY_MEMBER)
def get_event(club_id, event_id):
    return jsonify(get_event_or_404(club_id, event_id).to_dict())


@events_bp.route('', methods=['POST'])
@club_role_required(*MANAGERS)
def create_event(club_id):
    data = parse_body(EventSchema)

    event = Event(title=data.title, description=data.description, date=data.date, club_id=club_id)
    event.refresh_finished()
    db.session.add(event)
    db.session.commit()

    return jsonify(event.to_dict()), 201


@events_bp.route('/<id:event_id>', methods=['PUT'])
@club_role_required(*MANAGERS)
def update_event(club_id, event_id):
    data = parse_body(UpdateEventSchema)
    event = get_event_or_404(club_id, event_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(event, field, value)
    event.refresh_finished()
    db.session.commit()

    return jsonify(event.to_dict())


@events_bp.route('/<id:event_id>', methods=['DELETE'])
@club_role_required(*MANAGERS)
def delete_event(club_id, event_id):
    event = get_event_or_404(club_id, event_id)
    body = event.to_dict()

    db.session.delete(event)
    db.session.commit()

    return jsonify(body)
