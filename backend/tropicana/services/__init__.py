# Business services
