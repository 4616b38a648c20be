"""
Read-only subset of the ERC-721 Enumerable interface.
"""


def _view(name, inputs, output_type):
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": [{"name": arg, "type": arg_type} for arg, arg_type in inputs],
        "outputs": [{"name": "", "type": output_type}],
    }


ERC721_ENUMERABLE_ABI = [
    _view("name", [], "string"),
    _view("symbol", [], "string"),
    _view("tokenURI", [("tokenId", "uint256")], "string"),
    _view("ownerOf", [("tokenId", "uint256")], "address"),
    _view("balanceOf", [("owner", "address")], "uint256"),
    _view("totalSupply", [], "uint256"),
    _view("tokenByIndex", [("index", "uint256")], "uint256"),
    _view("tokenOfOwnerByIndex", [("owner", "address"), ("index", "uint256")], "uint256"),
    _view("supportsInterface", [("interfaceId", "bytes4")], "bool"),
]
