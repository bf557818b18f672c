# File: src/chainwallet/network/messages.py
"""
Protobuf messages for the ``blockchain.BlockchainService`` contract.

The descriptors are assembled from a FileDescriptorProto at import time and
registered in a private pool, which yields the same message classes protoc
would generate for blockchain.proto without a build step.
"""
from typing import List, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "blockchain"
SERVICE = f"{PACKAGE}.BlockchainService"

_F = descriptor_pb2.FieldDescriptorProto

# (field name, number, type, repeated, message type name)
FieldSpec = Tuple[str, int, int, bool, str]

_MESSAGES: List[Tuple[str, List[FieldSpec]]] = [
    ("Transaction", [
        ("from", 1, _F.TYPE_STRING, False, ""),
        ("to", 2, _F.TYPE_STRING, False, ""),
        ("amount", 3, _F.TYPE_UINT64, False, ""),
        ("timestamp", 4, _F.TYPE_UINT64, False, ""),
        ("signature", 5, _F.TYPE_BYTES, False, ""),
    ]),
    ("Block", [
        ("index", 1, _F.TYPE_UINT64, False, ""),
        ("timestamp", 2, _F.TYPE_INT64, False, ""),
        ("transactions", 3, _F.TYPE_MESSAGE, True, "Transaction"),
        ("previousHash", 4, _F.TYPE_STRING, False, ""),
        ("hash", 5, _F.TYPE_STRING, False, ""),
        ("nonce", 6, _F.TYPE_UINT64, False, ""),
        ("miner", 7, _F.TYPE_STRING, False, ""),
    ]),
    ("TransactionResponse", [
        ("success", 1, _F.TYPE_BOOL, False, ""),
        ("message", 2, _F.TYPE_STRING, False, ""),
    ]),
    ("BalanceRequest", [
        ("address", 1, _F.TYPE_STRING, False, ""),
    ]),
    ("BalanceResponse", [
        ("balance", 1, _F.TYPE_UINT64, False, ""),
    ]),
    ("FaucetRequest", [
        ("address", 1, _F.TYPE_STRING, False, ""),
    ]),
    ("FaucetResponse", [
        ("success", 1, _F.TYPE_BOOL, False, ""),
        ("amount", 2, _F.TYPE_UINT64, False, ""),
        ("message", 3, _F.TYPE_STRING, False, ""),
    ]),
    ("HistoryRequest", [
        ("address", 1, _F.TYPE_STRING, False, ""),
    ]),
    ("HistoryResponse", [
        ("transactions", 1, _F.TYPE_MESSAGE, True, "Transaction"),
    ]),
    ("GetStateRequest", [
        ("address", 1, _F.TYPE_STRING, False, ""),
    ]),
    ("StateResponse", [
        ("blocks", 1, _F.TYPE_MESSAGE, True, "Block"),
    ]),
    ("GetBlockRequest", [
        ("index", 1, _F.TYPE_UINT64, False, ""),
    ]),
    ("GetBlockResponse", [
        ("block", 1, _F.TYPE_MESSAGE, False, "Block"),
    ]),
]


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="blockchain.proto",
        package=PACKAGE,
        syntax="proto3"
    )
    for message_name, fields in _MESSAGES:
        message = file_proto.message_type.add(name=message_name)
        for name, number, field_type, repeated, type_name in fields:
            field = message.field.add(
                name=name,
                number=number,
                type=field_type,
                label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL
            )
            if type_name:
                field.type_name = f".{PACKAGE}.{type_name}"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Transaction = _message_class("Transaction")
Block = _message_class("Block")
TransactionResponse = _message_class("TransactionResponse")
BalanceRequest = _message_class("BalanceRequest")
BalanceResponse = _message_class("BalanceResponse")
FaucetRequest = _message_class("FaucetRequest")
FaucetResponse = _message_class("FaucetResponse")
HistoryRequest = _message_class("HistoryRequest")
HistoryResponse = _message_class("HistoryResponse")
GetStateRequest = _message_class("GetStateRequest")
StateResponse = _message_class("StateResponse")
GetBlockRequest = _message_class("GetBlockRequest")
GetBlockResponse = _message_class("GetBlockResponse")


# method name -> (request class, response class)
METHODS = {
    "SubmitTransaction": (Transaction, TransactionResponse),
    "GetBalance": (BalanceRequest, BalanceResponse),
    "RequestFaucet": (FaucetRequest, FaucetResponse),
    "GetHistory": (HistoryRequest, HistoryResponse),
    "GetState": (GetStateRequest, StateResponse),
    "GetBlock": (GetBlockRequest, GetBlockResponse),
}


class BlockchainServiceStub:
    """Client stub with one unary-unary callable per service method."""

    def __init__(self, channel):
        for method, (request_class, response_class) in METHODS.items():
            setattr(self, method, channel.unary_unary(
                f"/{SERVICE}/{method}",
                request_serializer=request_class.SerializeToString,
                response_deserializer=response_class.FromString
            ))
