# openflowsim

A discrete-event model of an OpenFlow network. It has switches with flow
tables and packet buffers, a controller that serves one message at a time, a
Kandoo agent that relays entries between local and root controllers, and
utilities that work on a network topology. The package uses only the standard
library.

## Installation

```
pip install .
pip install .[test]   # with pytest
```

## Modules

- `openflowsim.sim`
  - `Simulation` is a clock with an event queue. `schedule(delay, callback)`
    adds an event and a negative delay raises `ValueError`. `run(until=None)`
    runs events up to and including `until` and returns the final time.
    `pending` is the number of events that have not run yet.
  - `SignalBus` offers `subscribe(signal, listener)` and `emit(signal, value)`.
  - `ServiceQueue(sim, service_time, handler)` serves messages one at a time
    in FIFO order, and each one takes `service_time`.
- `openflowsim.messages`
  - Frames: `EthernetFrame`, `ArpPacket` and `PingPayload`.
  - OpenFlow messages: `Hello`, `FeaturesRequest`, `FeaturesReply`,
    `PacketIn`, `PacketOut` and `FlowMod`. They are all subclasses of
    `OpenFlowMessage`, and `MessageType` and `Port` give the type codes and
    reserved port numbers.
  - `KandooPacket` carries a `KandooEntry`.
  - `Connection` keeps every message it sends in `sent`. If a `deliver`
    callback is set, each message is also passed to it. Sending on a
    connection that is not connected raises `ConnectionError`.
  - `ping_hash(frame)` returns a stable 64-bit identifier for a ping frame,
    and 0 for any other frame.
- `openflowsim.switch`
  - `OpenFlowSwitch(sim, datapath_id, num_ports, service_time=0.0,
    buffer_capacity=10, send_complete_packet=False)` forwards frames
    according to its flow table.
  - On a miss it sends a `PacketIn` to the controller. The frame is stored in
    the buffer, unless `send_complete_packet` is set or the buffer is full; in
    that case the whole frame is sent with the `PacketIn`.
  - It answers a `FeaturesRequest`, installs a `FlowMod` and carries out the
    output actions of a `PacketOut` (flood, drop or a single port).
  - The methods are `connect(connection)` (which sends a `Hello`),
    `receive_frame(frame, in_port)`, `receive_control(message)`,
    `disable_ports(ports)` (blocks ports for flooding) and `scalars()`.
  - Frames that leave through data ports are appended to `transmitted` as
    `(port, frame)` pairs.
  - Frames that arrive before the switch is connected are counted and then
    dropped.
- `openflowsim.controller`
  - `Controller(sim, service_time)` replies to a switch's `Hello` with a
    `Hello` and a `FeaturesRequest`, and records the datapath id from each
    `FeaturesReply`.
  - It emits `PacketIn`, `PacketOut`, `Booted`, `queueSize`, `waitingTime` and
    other signals on `signals`.
  - `scalars()` gives `numPacketIn`, packets per second and the time-weighted
    queue size per second.
  - Apps are registered with `register_app`.
  - Registered switches can be looked up with `find_connection_for`,
    `find_switch_info_for` and `find_connection_for_chassis_id`, and
    `send_packet_out` sends a message to one of them.
- `openflowsim.kandoo_agent`
  - `KandooAgent(is_root_controller, connection, signals)` sends requests
    with `send_request` and replies with `send_reply` and
    `send_reply_to_switch_authoritative`.
  - The root agent remembers which connection each switch's local controller
    uses. Received packets are emitted on the `KandooEvent` signal.
- `openflowsim.wrappers` has `KandooEntry`, `EntryType` (inform, request,
  reply), `ArpWrapper` and `LldpWrapper`. `KandooEntry.reply_to(src_app,
  payload)` builds a reply addressed back to the sending switch.
- `openflowsim.flow_table` has `Match`, `Wildcard`, `FlowTableEntry` and
  `FlowTable`.
  - The newest entry is consulted first.
  - Expired entries are dropped during a lookup.
  - A hit on an entry with an idle timeout extends that entry's expiry.
- `openflowsim.buffer` has `PacketBuffer`, which stores frames under numeric
  buffer ids. Use `store`, `pop`, `is_full` and `len()`.
- `openflowsim.switch_info` has `SwitchInfo`, the controller's record of one
  switch connection.
- `openflowsim.topology`
  - `Topology` holds named nodes and gate-labelled directed links; use
    `add_node`, `connect` and `node`.
  - `is_switch_path(path)` decides whether a node is a switch.
  - Links through `gateCPlane` gates count as control plane.
- `openflowsim.graph_analyzer` has `GraphAnalyzer(topology)`.
  - `analyze()` computes hop-count shortest paths between every pair of hosts
    and ignores control-plane links.
  - `scalars()` reports the minimum, maximum and average path length, the
    number of paths, and how many paths pass through each node.
- `openflowsim.spanning_tree` has
  `compute_blocked_ports(topology, start_node=0, rng=None)`. It returns the
  gate indices that each node must block to form a spanning tree, and raises
  `ValueError` if the topology is empty or not connected.
- `openflowsim.involvement` has `ControllerInvolvementFilter`. It counts
  controller-plane ping hashes with `record` and reports them through
  `scalars()`.

## Example

```python
from openflowsim.controller import Controller
from openflowsim.messages import Connection, EthernetFrame
from openflowsim.sim import Simulation
from openflowsim.switch import OpenFlowSwitch

sim = Simulation()
controller = Controller(sim, service_time=0.001)
switch = OpenFlowSwitch(sim, "sw-1", num_ports=2)

to_switch = Connection(1, deliver=switch.receive_control)

def to_controller(message):
    message.connection = to_switch
    controller.receive(message)

packet_ins = []
controller.signals.subscribe("PacketIn", packet_ins.append)

switch.connect(Connection(1, deliver=to_controller))
sim.run()
assert controller.find_connection_for_chassis_id("sw-1") is to_switch

switch.receive_frame(EthernetFrame("02-00-00-00-00-01", "02-00-00-00-00-02", 0x0800), in_port=0)
sim.run()
assert len(packet_ins) == 1          # table miss went to the controller
print(switch.scalars(), controller.scalars())
```

## What it does not do

- The package has no command-line program and does not read simulation
  configuration files.
- Connections are in-process objects, not real network sockets.
- No forwarding, ARP or LLDP controller apps are included. The controller and
  the Kandoo agent emit signals, and you supply the apps that react to them.

## Tests

```
pytest
```