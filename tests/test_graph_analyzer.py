import pytest

from openflowsim.graph_analyzer import GraphAnalyzer
from openflowsim.topology import Topology


def _link(topo, a, b):
    topo.connect(a, b, "gateDataPlane$o")
    topo.connect(b, a, "gateDataPlane$o")


def _line():
    topo = Topology()
    for path in ("net.host1", "net.switch1", "net.switch2", "net.host2"):
        topo.add_node(path)
    _link(topo, "net.host1", "net.switch1")
    _link(topo, "net.switch1", "net.switch2")
    _link(topo, "net.switch2", "net.host2")
    return topo


def test_shortest_path_runs_from_target_back_to_source():
    path = GraphAnalyzer(_line()).shortest_path("net.host1", "net.host2")
    assert [n.path for n in path] == [
        "net.host2",
        "net.switch2",
        "net.switch1",
        "net.host1",
    ]


def test_shortest_path_to_itself():
    topo = _line()
    path = GraphAnalyzer(topo).shortest_path("net.host1", "net.host1")
    assert path == [topo.node("net.host1")]


def test_unreachable_gives_empty_path():
    topo = _line()
    topo.add_node("net.host3")
    assert GraphAnalyzer(topo).shortest_path("net.host1", "net.host3") == []


def test_control_plane_link_not_traversed():
    topo = Topology()
    topo.add_node("net.switch1")
    topo.add_node("net.switch2")
    topo.connect("net.switch1", "net.switch2", "gateCPlane$o")
    assert GraphAnalyzer(topo).shortest_path("net.switch1", "net.switch2") == []


def test_prefers_fewer_hops():
    topo = Topology()
    for path in ("net.host1", "net.switchA", "net.switchB", "net.switchC", "net.host2"):
        topo.add_node(path)
    _link(topo, "net.host1", "net.switchA")
    _link(topo, "net.switchA", "net.switchB")
    _link(topo, "net.switchB", "net.switchC")
    _link(topo, "net.switchA", "net.switchC")
    _link(topo, "net.switchC", "net.host2")
    path = GraphAnalyzer(topo).shortest_path("net.host1", "net.host2")
    assert "net.switchB" not in [n.path for n in path]
    assert path[-1] is topo.node("net.host1")


def test_analyze_line_statistics():
    topo = _line()
    analyzer = GraphAnalyzer(topo)
    analyzer.analyze()
    scalars = analyzer.scalars()
    hosts = [n for n in topo if not n.is_switch]
    hops = len(analyzer.shortest_path("net.host1", "net.host2")) - 1
    assert scalars["numPaths"] == len(hosts) * (len(hosts) - 1)
    assert scalars["numClients"] == len(hosts)
    assert scalars["numSwitches"] == len(topo) - len(hosts)
    assert scalars["minPathLength"] == hops
    assert scalars["maxPathLength"] == hops
    assert scalars["avgPathLength"] == float(hops)
    assert scalars["avgNumSwitchLinks"] == 2.0
    assert scalars["nodeInNumPaths-net.switch1"] == scalars["numPaths"]
    assert scalars["nodeInNumPaths-net.host2"] == scalars["numPaths"]


def test_scalar_names_in_recorded_order():
    analyzer = GraphAnalyzer(_line())
    analyzer.analyze()
    assert list(analyzer.scalars())[:9] == [
        "minPathLength",
        "maxPathLength",
        "avgPathLength",
        "avgNumSwitchLinks",
        "numClients",
        "numSwitches",
        "numPaths",
        "nodeInNumPaths-net.switch1",
        "nodeInNumPaths-net.switch2",
    ]


def test_control_plane_links_do_not_change_statistics():
    plain = GraphAnalyzer(_line())
    plain.analyze()
    topo = _line()
    topo.connect("net.switch1", "net.switch2", "gateCPlane$o")
    with_control = GraphAnalyzer(topo)
    with_control.analyze()
    assert with_control.scalars() == plain.scalars()


def test_no_switch_on_any_path_raises():
    topo = Topology()
    topo.add_node("net.host1")
    topo.add_node("net.host2")
    _link(topo, "net.host1", "net.host2")
    with pytest.raises(ValueError):
        GraphAnalyzer(topo).analyze()


def test_scalars_before_analyze_raises():
    with pytest.raises(RuntimeError):
        GraphAnalyzer(_line()).scalars()