from bookdaan.models.enums import UserRole
from bookdaan.routes.recommendation_routes import recommend_books


def test_recommendations_fall_back_to_newest_available(db, make_user, make_book) -> None:
    donor = make_user('donor@example.com', role=UserRole.DONOR.value)
    reader = make_user('reader@example.com')
    for index in range(7):
        make_book(donor, title=f'Book {index}')
    make_book(donor, title='Gone', status='donated')

    books = recommend_books(db, reader)

    assert [book.title for book in books] == ['Book 6', 'Book 5', 'Book 4', 'Book 3', 'Book 2']


def test_recommendations_match_preferred_categories(db, make_user, make_book) -> None:
    donor = make_user('donor@example.com', role=UserRole.DONOR.value)
    reader = make_user('reader@example.com', preferences=['science', 'poetry'])
    make_book(donor, title='Cosmos', category='Science')
    make_book(donor, title='Odes', category='Poetry')
    make_book(donor, title='Gone', category='Science', status='requested')
    make_book(donor, title='Sapiens', category='History')

    books = recommend_books(db, reader)

    assert {book.title for book in books} == {'Cosmos', 'Odes'}


def test_recommendations_endpoint_caps_results(client, make_user, make_book, headers_for) -> None:
    donor = make_user('donor@example.com', role=UserRole.DONOR.value)
    reader = make_user('reader@example.com', preferences=['Fiction'])
    for index in range(8):
        make_book(donor, title=f'Novel {index}', category='Fiction')

    response = client.get('/api/recommendations', headers=headers_for(reader))

    assert response.status_code == 200
    assert len(response.json()) == 5


def test_recommendations_require_token(client) -> None:
    assert client.get('/api/recommendations').status_code == 401


def test_recommendation_preferences_match_wildcards_literally(db, make_user, make_book) -> None:
    donor = make_user('donor@example.com', role=UserRole.DONOR.value)
    reader = make_user('reader@example.com', preferences=['sci_fi'])
    make_book(donor, title='Dune', category='Sci_Fi')
    make_book(donor, title='Lookalike', category='SciXFi')

    books = recommend_books(db, reader)

    assert [book.title for book in books] == ['Dune']
