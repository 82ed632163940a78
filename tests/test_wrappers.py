from openflowsim.wrappers import ArpWrapper, EntryType, KandooEntry, LldpWrapper


def _request():
    return KandooEntry(
        src_controller="net.controller1",
        trg_controller="RootController",
        trg_app="KN_ARPResponder",
        src_app="KN_ARPResponder",
        trg_switch="",
        src_switch="02:00:00:00:00:01",
        payload="packet",
        type=EntryType.REQUEST,
    )


def test_arp_wrapper_holds_binding():
    wrapper = ArpWrapper(src_ip="10.0.0.1", src_mac="02:00:00:00:00:aa")
    assert wrapper.src_ip == "10.0.0.1"
    assert wrapper.src_mac == "02:00:00:00:00:aa"
    assert wrapper == ArpWrapper("10.0.0.1", "02:00:00:00:00:aa")


def test_lldp_wrapper_end_device_port():
    wrapper = LldpWrapper(dst_id="sw1", dst_port=3, src_id="02:00:00:00:00:bb", src_port=-1)
    assert wrapper.src_port == -1
    assert (wrapper.dst_id, wrapper.dst_port) == ("sw1", 3)


def test_default_entry_is_inform():
    entry = KandooEntry()
    assert entry.type is EntryType.INFORM
    assert entry.payload is None


def test_reply_swaps_controllers_and_targets_source_switch():
    request = _request()
    reply = request.reply_to("KN_ARPResponder", "out")
    assert reply.type == EntryType.REPLY
    assert reply.type == 2
    assert reply.trg_controller == request.src_controller
    assert reply.src_controller == request.trg_controller
    assert reply.trg_switch == request.src_switch
    assert reply.src_switch == ""
    assert reply.payload == "out"


def test_reply_sets_both_apps():
    reply = _request().reply_to("KN_LLDPForwarding", None)
    assert reply.trg_app == "KN_LLDPForwarding"
    assert reply.src_app == "KN_LLDPForwarding"


def test_reply_leaves_request_unchanged():
    request = _request()
    request.reply_to("KN_ARPResponder", "out")
    assert request.type == EntryType.REQUEST
    assert request.payload == "packet"