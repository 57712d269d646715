GREETING = "Hi there! I'm your Techradar assistant. How can I help you today?"

FALLBACK = "I'm not sure about that. Can you try asking something about finding tech products or stores?"

# Checked in order; the first keyword found anywhere in the message wins.
RESPONSES: dict[str, str] = {
    "hello": "Hello! How can I help you with Techradar today?",
    "hi": "Hi there! How can I assist you with finding tech products?",
    "help": "I can help you find stores, search for products, or answer questions about Techradar. What would you like to know?",
    "store": "You can search for stores by entering a location in the search bar on the dashboard. We'll show you all the tech stores in that area.",
    "product": "Techradar helps you find tech products like phones, laptops, and accessories from local stores. You can search for stores and view their available products.",
    "phone": "You can find phones from various local stores on Techradar. Just search for a location and browse the available stores.",
    "laptop": "Looking for a laptop? Techradar can help you find local stores that sell laptops. Use the search feature to find stores near you.",
    "price": "Prices for products are listed in Indian Rupees (₹). Each store sets their own prices for products.",
    "contact": "If you need to contact a store, you can view their details after finding them in the search results.",
    "account": "You can manage your account from the profile section. Click on 'Profile' in the navigation menu.",
    "bye": "Goodbye! Feel free to come back if you have more questions.",
    "thanks": "You're welcome! Is there anything else I can help you with?",
    "thank you": "You're welcome! Is there anything else I can help you with?",
}


def generate_response(query: str) -> str:
    normalized = query.lower().strip()
    for keyword, response in RESPONSES.items():
        if keyword in normalized:
            return response
    return FALLBACK
