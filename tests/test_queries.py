from solution_graph.core.artifacts import Artifact
from solution_graph.core.queries import (
    build_query_artifact,
    collect_queries,
    enrich,
    extract_normalization_tokens,
    is_query_path,
)
from solution_graph.core.records import ConnectorRecord, DependencyRecord, QueryArtifact


def _connector(name: str, tables: tuple[str, ...]) -> ConnectorRecord:
    c = ConnectorRecord(
        name=name,
        data_source="Src",
        connection_type="pull",
        mechanism="CCF",
        is_ccf=True,
        path=f"{name}.json",
    )
    c.dependencies = [
        DependencyRecord(name="dcr", streams=(), tables=tables, destinations=(), roles=(), path="dcr.json")
    ]
    return c


def test_query_paths() -> None:
    assert is_query_path("Solutions/S/Hunting Queries/q.json")
    assert is_query_path("Solutions/S/hunting/q.json")
    assert is_query_path("Solutions/S/Queries/HuntingLogons.json")
    assert not is_query_path("Solutions/S/Analytic Rules/r.json")
    assert not is_query_path("Solutions/S/Workbooks/Deep/q.json")


def test_build_query_artifact_field_fallbacks() -> None:
    a = Artifact(path="h/q.json", document={"name": "n", "query": "Syslog | take 1"})
    assert build_query_artifact(a) == QueryArtifact(name="n", query="Syslog | take 1", path="h/q.json")

    a = Artifact(path="h/q.json", document={"properties": {"title": "T", "kql": "Perf"}})
    assert build_query_artifact(a) == QueryArtifact(name="T", query="Perf", path="h/q.json")

    assert build_query_artifact(Artifact(path="h/q.json", document={"query": "   "})) is None
    assert build_query_artifact(Artifact(path="h/q.json", document={"query": 5})) is None
    assert build_query_artifact(Artifact(path="h/q.json", document=[])) is None


def test_collect_queries_only_from_query_paths() -> None:
    arts = [
        Artifact(path="S/Hunting Queries/a.json", document={"properties": {"displayName": "A", "query": "x"}}),
        Artifact(path="S/Analytic Rules/b.json", document={"properties": {"displayName": "B", "query": "x"}}),
    ]
    assert [q.name for q in collect_queries(arts)] == ["A"]


def test_normalization_tokens() -> None:
    q = "imAuthentication | union ASIM_Dns, _ASim_Skip, ASIM_Dns | where image has 'x' | imNetworkSession_v2"
    assert extract_normalization_tokens(q) == ["ASIM_Dns", "imAuthentication", "imNetworkSession_v2"]


def test_standalone_table_word_records_hit_and_tokens() -> None:
    c = _connector("Sys", ("Syslog",))
    queries = [
        QueryArtifact(name="hit", query="syslog | invoke ASIM_AuthParser() | imAuthentication", path="h1.json"),
        QueryArtifact(name="miss", query="SyslogExtended | take 5", path="h2.json"),
    ]
    enrich([c], queries)
    assert [h.name for h in c.hunting] == ["hit"]
    assert c.hunting_count == 1
    assert c.normalization == ["ASIM_AuthParser", "imAuthentication"]


def test_one_hit_per_query_even_with_several_table_matches() -> None:
    c = _connector("Multi", ("Syslog", "Perf"))
    enrich([c], [QueryArtifact(name="q", query="Syslog | join Perf", path="q.json")])
    assert c.hunting_count == 1


def test_tokens_are_merged_across_hits_without_duplicates() -> None:
    c = _connector("Multi", ("Perf",))
    enrich(
        [c],
        [
            QueryArtifact(name="a", query="Perf | imDns", path="a.json"),
            QueryArtifact(name="b", query="Perf | imDns | ASIM_X", path="b.json"),
        ],
    )
    assert c.normalization == ["imDns", "ASIM_X"]


def test_connector_without_tables_gets_no_hits() -> None:
    c = _connector("Empty", ())
    enrich([c], [QueryArtifact(name="a", query="anything imDns", path="a.json")])
    assert c.hunting == []
    assert c.normalization == []


def test_table_names_with_regex_characters_are_matched_literally() -> None:
    c = _connector("Odd", ("a.b",))
    enrich([c], [QueryArtifact(name="a", query="axb | take 1", path="a.json")])
    assert c.hunting == []


def test_enrichment_only_uses_dependency_tables() -> None:
    c = _connector("Sys", ("Syslog",))
    c.dependencies.append(
        DependencyRecord(name="d2", streams=(), tables=("Perf",), destinations=(), roles=(), path="d2.json")
    )
    assert c.table_names() == {"Syslog", "Perf"}
    enrich([c], [QueryArtifact(name="p", query="Perf", path="p.json"), QueryArtifact(name="w", query="WindowsEvents", path="w.json")])
    assert [h.name for h in c.hunting] == ["p"]
