"""
Tests for Graph Derivation
==========================
Nodes from rows, links from acquisition-history mentions.
"""

from core.graph import Link, Node, derive_graph, primary_group, to_networkx


class TestPrimaryGroup:
    """Tests for the node group taken from Main Sport Focus."""

    def test_first_token(self):
        assert primary_group("Climbing, Hiking, Surfing") == "Climbing"

    def test_no_comma_is_whole_field(self):
        assert primary_group("  Trail Running ") == "Trail Running"

    def test_empty(self):
        assert primary_group("") == ""


class TestDeriveGraph:
    """Tests for derive_graph."""

    def test_acme_beta_example(self, acme_beta):
        nodes, links = derive_graph(acme_beta)
        assert [n.id for n in nodes] == ["Acme", "Beta"]
        assert links == [Link(source="Acme", target="Beta")]

    def test_nodes_follow_row_order(self, companies):
        nodes, _ = derive_graph(companies)
        assert nodes == [
            Node("Acme Outdoors", "Climbing"),
            Node("Beta Gear", "Skiing"),
            Node("Gamma Paddle", "Kayaking"),
            Node("Delta Trails", "Trail Running"),
        ]

    def test_links_in_source_then_target_order(self, companies):
        _, links = derive_graph(companies)
        assert links == [Link("Acme Outdoors", "Beta Gear"), Link("Beta Gear", "Gamma Paddle")]

    def test_no_self_links(self, row_factory):
        rows = row_factory([{"Company": "Solo", "Acquisition History": "Solo bought itself back"}])
        _, links = derive_graph(rows)
        assert links == []

    def test_match_is_case_sensitive(self, row_factory):
        rows = row_factory(
            [
                {"Company": "Acme", "Acquisition History": ""},
                {"Company": "Beta", "Acquisition History": "merged with ACME"},
            ]
        )
        assert derive_graph(rows)[1] == []

    def test_mutual_mentions_give_two_links(self, row_factory):
        rows = row_factory(
            [
                {"Company": "North", "Acquisition History": "Acquired by Parent in 2000"},
                {"Company": "Parent", "Acquisition History": "Acquired North in 2000"},
            ]
        )
        _, links = derive_graph(rows)
        assert links == [Link("North", "Parent"), Link("Parent", "North")]

    def test_dedupe_keeps_first_of_each_pair(self, row_factory):
        rows = row_factory(
            [
                {"Company": "North", "Acquisition History": "Acquired by Parent in 2000"},
                {"Company": "Parent", "Acquisition History": "Acquired North in 2000"},
            ]
        )
        _, links = derive_graph(rows, dedupe=True)
        assert links == [Link("North", "Parent")]

    def test_substring_names_produce_false_positive(self, row_factory):
        """'Arc' is contained in "Arc'teryx", so it links wherever Arc'teryx is mentioned."""
        rows = row_factory(
            [
                {"Company": "Arc"},
                {"Company": "Arc'teryx"},
                {"Company": "Amer", "Acquisition History": "Owns Arc'teryx"},
            ]
        )
        _, links = derive_graph(rows)
        assert Link("Arc", "Amer") in links
        assert Link("Arc'teryx", "Amer") in links

    def test_deterministic(self, companies):
        assert derive_graph(companies) == derive_graph(companies)

    def test_empty_rows(self, row_factory):
        assert derive_graph(row_factory([])) == ([], [])


class TestToNetworkx:
    """Tests for the networkx view of the graph."""

    def test_counts(self, companies):
        graph = to_networkx(*derive_graph(companies))
        assert graph.number_of_nodes() == 4
        assert graph.number_of_edges() == 2
        assert graph.nodes["Gamma Paddle"]["group"] == "Kayaking"
        assert graph.degree["Beta Gear"] == 2
