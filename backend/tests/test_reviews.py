"""Tests for rating statistics and review listings."""
from storefront.services.reviews import (
    fold_rating_counts,
    build_rating_statistics,
    get_rating_statistics,
    get_product_filtered_reviews,
)


class TestFoldRatingCounts:
    def test_half_stars_fold_into_lower_bucket(self):
        assert fold_rating_counts([(4.5, 2), (4.0, 1), (1.5, 1), (5.0, 3)]) == [1, 0, 0, 3, 3]

    def test_out_of_range_ratings_dropped(self):
        assert fold_rating_counts([(0.5, 4), (6.0, 1), (3.0, 2)]) == [0, 0, 2, 0, 0]

    def test_empty(self):
        assert fold_rating_counts([]) == [0, 0, 0, 0, 0]


class TestBuildRatingStatistics:
    def test_percentages(self):
        stats = build_rating_statistics([(5.0, 3), (4.5, 1)], reviews_with_images_count=2)

        assert stats.total_reviews == 4
        assert stats.reviews_with_images_count == 2
        assert [b.rating for b in stats.rating_statistics] == [1, 2, 3, 4, 5]
        assert [b.num_reviews for b in stats.rating_statistics] == [0, 0, 0, 1, 3]
        assert stats.rating_statistics[3].percentage == 25
        assert stats.rating_statistics[4].percentage == 75

    def test_no_reviews(self):
        stats = build_rating_statistics([], 0)

        assert stats.total_reviews == 0
        assert all(b.percentage == 0 for b in stats.rating_statistics)


def test_rating_statistics_from_database(db, product, add_review):
    add_review(product.product_id, 5.0, images=2)
    add_review(product.product_id, 5.0)
    add_review(product.product_id, 4.5, images=1)
    add_review(product.product_id, 2.0)

    stats = get_rating_statistics(db, product.product_id)

    assert stats.total_reviews == 4
    assert stats.reviews_with_images_count == 2
    assert [b.num_reviews for b in stats.rating_statistics] == [0, 1, 0, 1, 2]


class TestFilteredReviews:
    def test_rating_filter_includes_half_star(self, db, product, add_review):
        four = add_review(product.product_id, 4.0)
        four_half = add_review(product.product_id, 4.5)
        add_review(product.product_id, 5.0)

        reviews = get_product_filtered_reviews(db, product.product_id, rating=4)

        assert {r.id for r in reviews} == {four.id, four_half.id}

    def test_has_images(self, db, product, add_review):
        with_images = add_review(product.product_id, 3.0, images=1)
        add_review(product.product_id, 3.0)

        reviews = get_product_filtered_reviews(db, product.product_id, has_images=True)

        assert [r.id for r in reviews] == [with_images.id]

    def test_highest_first_by_default(self, db, product, add_review):
        add_review(product.product_id, 2.0)
        add_review(product.product_id, 5.0)
        add_review(product.product_id, 3.5)

        reviews = get_product_filtered_reviews(db, product.product_id)

        assert [r.rating for r in reviews] == [5.0, 3.5, 2.0]

    def test_pagination(self, db, product, add_review):
        for rating in (1.0, 2.0, 3.0, 4.0, 5.0):
            add_review(product.product_id, rating)

        first = get_product_filtered_reviews(db, product.product_id, page=1, page_size=4)
        second = get_product_filtered_reviews(db, product.product_id, page=2, page_size=4)

        assert len(first) == 4
        assert [r.rating for r in second] == [1.0]


def test_reviews_endpoint(client, product, add_review):
    add_review(product.product_id, 4.0, images=1, text="Comfortable")

    response = client.get(f"/api/products/{product.product_id}/reviews", params={"rating": 4})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert body[0]["review"] == "Comfortable"
    assert body[0]["user"]["name"] == "Sam Shopper"
    assert len(body[0]["images"]) == 1


def test_rating_statistics_endpoint(client, product, add_review):
    add_review(product.product_id, 3.0)

    response = client.get(f"/api/products/{product.product_id}/rating-statistics")

    assert response.status_code == 200
    assert response.json()["total_reviews"] == 1
    assert response.json()["rating_statistics"][2]["percentage"] == 100
