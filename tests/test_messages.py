import pytest

from openflowsim.buffer import OFP_NO_BUFFER
from openflowsim.messages import (
    ArpPacket,
    Connection,
    EthernetFrame,
    FeaturesReply,
    FeaturesRequest,
    FlowMod,
    Hello,
    KandooPacket,
    MessageType,
    PacketIn,
    PacketOut,
    PingPayload,
    ping_hash,
)
from openflowsim.wrappers import KandooEntry


@pytest.mark.parametrize(
    "message, expected",
    [
        (Hello(), MessageType.HELLO),
        (FeaturesRequest(), MessageType.FEATURES_REQUEST),
        (FeaturesReply(), MessageType.FEATURES_REPLY),
        (PacketIn(), MessageType.PACKET_IN),
        (PacketOut(), MessageType.PACKET_OUT),
        (FlowMod(), MessageType.FLOW_MOD),
    ],
)
def test_message_types(message, expected):
    assert message.type == expected


def test_header_lengths_follow_the_source():
    assert Hello().byte_length == 8
    assert FeaturesRequest().byte_length == 8
    assert FeaturesReply().byte_length == 32
    assert PacketIn().byte_length == 32
    assert PacketOut().byte_length == 24


def test_packet_defaults_use_no_buffer():
    assert PacketIn().buffer_id == OFP_NO_BUFFER
    assert PacketOut().buffer_id == OFP_NO_BUFFER
    assert PacketOut().in_port == -1


def test_kandoo_packet_is_one_byte():
    packet = KandooPacket(KandooEntry(trg_app="app"))
    assert packet.byte_length == 1
    assert packet.entry.trg_app == "app"


def test_connection_records_and_delivers():
    delivered = []
    conn = Connection(3, deliver=delivered.append)
    hello = Hello()
    conn.send(hello)
    assert conn.sent == [hello]
    assert delivered == [hello]


def test_connection_refuses_when_not_connected():
    conn = Connection(1, connected=False)
    with pytest.raises(ConnectionError):
        conn.send(Hello())
    assert conn.sent == []


def test_connections_compare_by_identity():
    first = Connection(1)
    second = Connection(1)
    connections = [first, second]
    assert connections.index(first) == 0
    assert connections.index(second) == 1


def _ping_frame(seq, pid):
    return EthernetFrame("0a:00:00:00:00:01", "0a:00:00:00:00:02", 0x0800, PingPayload(seq, pid))


def test_ping_hash_is_stable_for_same_ping():
    hashes = {
        ping_hash(_ping_frame(4, 9)),
        ping_hash(_ping_frame(4, 9)),
        ping_hash(_ping_frame(5, 9)),
    }
    assert len(hashes) == 2
    assert 0 not in hashes


def test_ping_hash_distinguishes_pings():
    assert ping_hash(_ping_frame(4, 9)) != ping_hash(_ping_frame(5, 9))
    assert ping_hash(_ping_frame(4, 9)) > 0


def test_ping_hash_fits_64_bits():
    assert ping_hash(_ping_frame(1, 1)) < 1 << 64


def test_non_ping_frames_hash_to_zero():
    arp = ArpPacket(1, "0a:00:00:00:00:01", "", "10.0.0.1", "10.0.0.2")
    assert ping_hash(EthernetFrame("a", "b", 0x0806, arp)) == 0
    assert ping_hash(None) == 0