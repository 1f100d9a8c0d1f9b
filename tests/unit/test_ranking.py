"""Unit tests for embedding-based link ranking."""

from __future__ import annotations

import pytest

from hubcap.models.link import LinkCategory
from hubcap.services.ranking import average_embedding, cosine_similarity, rank_links


class TestCosineSimilarity:
    def test_identical_vectors(self) -> None:
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self) -> None:
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_zero_norm_returns_zero(self) -> None:
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(ValueError):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])


class TestAverageEmbedding:
    def test_mean(self) -> None:
        assert average_embedding([[1.0, 3.0], [3.0, 5.0]]) == pytest.approx([2.0, 4.0])

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            average_embedding([])


class TestRankLinks:
    def test_no_feedback_is_identity(self, make_link) -> None:
        links = [make_link(url=f"https://site.org/{i}") for i in range(3)]

        assert rank_links(links, [], []) == links

    def test_liked_direction_first(self, make_link) -> None:
        far = make_link(url="https://site.org/far", embedding=[0.0, 1.0])
        near = make_link(url="https://site.org/near", embedding=[1.0, 0.0])

        ranked = rank_links([far, near], liked=[[1.0, 0.0]], disliked=[])

        assert [link.url for link in ranked] == [near.url, far.url]

    def test_disliked_direction_last(self, make_link) -> None:
        bad = make_link(url="https://site.org/bad", embedding=[1.0, 0.0])
        good = make_link(url="https://site.org/good", embedding=[0.0, 1.0])

        ranked = rank_links([bad, good], liked=[], disliked=[[1.0, 0.0]])

        assert [link.url for link in ranked] == [good.url, bad.url]

    def test_missing_or_mismatched_embedding_scores_zero(self, make_link) -> None:
        liked_like = make_link(url="https://site.org/liked", embedding=[1.0, 0.0])
        unembedded = make_link(url="https://site.org/none")
        wrong_dim = make_link(url="https://site.org/wrong", embedding=[1.0, 0.0, 0.0])
        disliked_like = make_link(url="https://site.org/disliked", embedding=[-1.0, 0.0])

        ranked = rank_links(
            [unembedded, disliked_like, wrong_dim, liked_like],
            liked=[[1.0, 0.0]],
            disliked=[],
        )

        assert [link.url for link in ranked] == [
            liked_like.url,
            unembedded.url,
            wrong_dim.url,
            disliked_like.url,
        ]

    def test_stable_for_equal_scores(self, make_link) -> None:
        links = [
            make_link(url=f"https://site.org/{i}", embedding=[1.0, 0.0]) for i in range(4)
        ]

        ranked = rank_links(links, liked=[[1.0, 0.0]], disliked=[[0.0, 1.0]])

        assert ranked == links

    def test_never_adds_or_drops(self, make_link) -> None:
        links = [
            make_link(
                url=f"https://site.org/{i}",
                category=LinkCategory.PODCASTS,
                embedding=[float(i), 1.0],
            )
            for i in range(5)
        ]

        ranked = rank_links(links, liked=[[1.0, 0.0]], disliked=[[0.0, 1.0]])

        assert sorted(link.url for link in ranked) == sorted(link.url for link in links)
