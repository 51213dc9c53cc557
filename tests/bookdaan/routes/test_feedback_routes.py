import pytest
from fastapi import HTTPException

from bookdaan.models.enums import UserRole
from bookdaan.routes.feedback_routes import create_feedback
from bookdaan.schemas import CreateFeedbackRequest
from bookdaan.services import lifecycle


@pytest.fixture
def exchange(db, make_user, make_book):
    donor = make_user('donor@example.com', role=UserRole.DONOR.value)
    recipient = make_user('reader@example.com')
    book = make_book(donor)
    book_request = lifecycle.create_request(db, book.id, recipient)
    lifecycle.update_request_status(db, book_request.id, donor, 'completed')
    return donor, recipient, book_request


def test_recipient_feedback_goes_to_donor(client, exchange, headers_for) -> None:
    donor, recipient, book_request = exchange

    response = client.post(
        '/api/feedback',
        headers=headers_for(recipient),
        json={'requestId': book_request.id, 'rating': 5, 'comment': 'Great condition'},
    )

    assert response.status_code == 201
    assert response.json()['fromId'] == recipient.id
    assert response.json()['toId'] == donor.id

    received = client.get('/api/feedback', headers=headers_for(donor)).json()
    assert [item['rating'] for item in received] == [5]
    assert client.get('/api/feedback', headers=headers_for(recipient)).json() == []


def test_donor_feedback_goes_to_recipient(db, exchange) -> None:
    donor, recipient, book_request = exchange

    feedback = create_feedback(
        data=CreateFeedbackRequest(request_id=book_request.id, rating=4),
        current_user=donor,
        db=db,
    )

    assert feedback.to_id == recipient.id


def test_outsider_cannot_leave_feedback(db, exchange, make_user) -> None:
    _, _, book_request = exchange
    outsider = make_user('outsider@example.com')

    with pytest.raises(HTTPException) as exception_info:
        create_feedback(
            data=CreateFeedbackRequest(request_id=book_request.id, rating=1),
            current_user=outsider,
            db=db,
        )

    assert exception_info.value.status_code == 403


def test_feedback_for_missing_request(db, make_user) -> None:
    with pytest.raises(HTTPException) as exception_info:
        create_feedback(
            data=CreateFeedbackRequest(request_id=12, rating=3),
            current_user=make_user('reader@example.com'),
            db=db,
        )

    assert exception_info.value.status_code == 404


def test_rating_out_of_range_returns_400(client, exchange, headers_for) -> None:
    _, recipient, book_request = exchange

    response = client.post('/api/feedback', headers=headers_for(recipient), json={'requestId': book_request.id, 'rating': 6})

    assert response.status_code == 400
