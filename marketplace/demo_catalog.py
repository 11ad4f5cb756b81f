"""Demo products served when the catalog is empty or the store is unreachable."""

DEMO_PRODUCTS = [
    {
        "_id": "1",
        "title": "Apple iPhone 15 Pro Max - 256GB - Natural Titanium",
        "price": 1199.99,
        "imageUrl": "https://via.placeholder.com/300x300?text=iPhone+15",
        "brand": "Apple",
        "category": "electronics",
        "productDescription": "The latest iPhone with A17 Pro chip",
        "rating": 4.5,
        "numReviews": 2847,
        "countInStock": 10,
    },
    {
        "_id": "2",
        "title": "Sony WH-1000XM5 Wireless Noise Canceling Headphones",
        "price": 349.99,
        "imageUrl": "https://via.placeholder.com/300x300?text=Sony+Headphones",
        "brand": "Sony",
        "category": "electronics",
        "productDescription": "Industry-leading noise cancellation",
        "rating": 4.8,
        "numReviews": 5623,
        "countInStock": 25,
    },
    {
        "_id": "3",
        "title": 'Samsung 65" Class OLED 4K Smart TV',
        "price": 1799.99,
        "imageUrl": "https://via.placeholder.com/300x300?text=Samsung+TV",
        "brand": "Samsung",
        "category": "electronics",
        "productDescription": "Stunning OLED display",
        "rating": 4.7,
        "numReviews": 1234,
        "countInStock": 5,
    },
    {
        "_id": "4",
        "title": "Nike Air Max 270 Running Shoes",
        "price": 159.99,
        "imageUrl": "https://via.placeholder.com/300x300?text=Nike+Shoes",
        "brand": "Nike",
        "category": "fashion",
        "productDescription": "Comfortable running shoes",
        "rating": 4.3,
        "numReviews": 892,
        "countInStock": 50,
    },
    {
        "_id": "5",
        "title": "The Complete JavaScript Course 2024",
        "price": 49.99,
        "imageUrl": "https://via.placeholder.com/300x300?text=JS+Book",
        "brand": "Tech Books",
        "category": "books",
        "productDescription": "Learn JavaScript from scratch",
        "rating": 4.9,
        "numReviews": 3421,
        "countInStock": 100,
    },
    {
        "_id": "6",
        "title": "Instant Pot Duo 7-in-1 Electric Pressure Cooker",
        "price": 89.99,
        "imageUrl": "https://via.placeholder.com/300x300?text=Instant+Pot",
        "brand": "Instant Pot",
        "category": "home",
        "productDescription": "Multi-functional cooker",
        "rating": 4.6,
        "numReviews": 7854,
        "countInStock": 30,
    },
]
